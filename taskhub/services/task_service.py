"""작업 서비스 — 작업 CRUD 및 참조 검증 비즈니스 로직.

Task Service — Business logic for tasks. Any role may create a task;
the creator, an assignee or a manager may update it; the creator or a
manager may delete it. Every referenced status, priority, project and
board must be a live row of the caller's tenant.
"""

from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.project import Board
from taskhub.models.task import Task
from taskhub.models.user import User
from taskhub.repositories.task_activity_repository import (
    task_assignment_repository,
    task_comment_repository,
    task_status_change_repository,
)
from taskhub.repositories.task_repository import task_repository
from taskhub.schemas.task import TaskCreate, TaskDetail, TaskSummary, TaskUpdate
from taskhub.services.board_service import board_service
from taskhub.services.catalog_service import catalog_to_response, task_priority_service, task_status_service
from taskhub.services.project_service import project_service
from taskhub.utils.exceptions import BadRequestError, ForbiddenError, NotFoundError
from taskhub.utils.pagination import PageParams, build_page


def _live(item: Any) -> Any:
    """삭제된 카탈로그 항목은 None으로 취급 — Treat soft-deleted catalog rows as absent."""
    if item is None or item.deleted_at is not None:
        return None
    return item


class TaskService:
    """작업 관련 비즈니스 로직을 처리하는 서비스."""

    def _summary_fields(self, task: Task) -> dict[str, Any]:
        status = _live(task.status)
        priority = _live(task.priority)
        return {
            "id": str(task.id),
            "title": task.title,
            "status_id": str(task.status_id) if task.status_id else None,
            "status_name": status.name if status else None,
            "priority_id": str(task.priority_id) if task.priority_id else None,
            "priority_name": priority.name if priority else None,
            "creator_id": str(task.creator_id),
            "project_id": str(task.project_id) if task.project_id else None,
            "board_id": str(task.board_id) if task.board_id else None,
            "due_date": task.due_date,
            "created_at": task.created_at,
            "updated_at": task.updated_at,
        }

    def _to_summary(self, task: Task) -> TaskSummary:
        return TaskSummary(**self._summary_fields(task))

    def _to_detail(self, task: Task) -> TaskDetail:
        status = _live(task.status)
        priority = _live(task.priority)
        return TaskDetail(
            **self._summary_fields(task),
            organization_id=str(task.organization_id),
            description=task.description,
            status=catalog_to_response(status) if status else None,
            priority=catalog_to_response(priority) if priority else None,
            assignee_ids=[str(a.assignee_id) for a in task.assignments],
        )

    async def get_entity(
        self,
        db: AsyncSession,
        task_id: UUID,
        organization_id: UUID,
    ) -> Task:
        """조직 내 작업 조회 — 없으면 404 (child resources resolve their task here).

        Raises:
            NotFoundError: 작업을 찾을 수 없을 때 (Task not found)
        """
        task: Task | None = await task_repository.get_by_id(db, task_id, organization_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    async def _load_detail(self, db: AsyncSession, task_id: UUID, organization_id: UUID) -> TaskDetail:
        task: Task | None = await task_repository.get_detail(db, task_id, organization_id)
        if task is None:
            raise NotFoundError("Task not found")
        return self._to_detail(task)

    async def _validate_references(
        self,
        db: AsyncSession,
        organization_id: UUID,
        refs: dict[str, Any],
    ) -> None:
        """상태/우선순위/프로젝트/보드 참조 검증.

        Verify every non-null reference exists in the tenant. A board given
        without a project adopts the board's project; a board given with a
        different project is rejected.

        Raises:
            NotFoundError: 참조 대상이 없을 때 (Referenced row missing in tenant)
            BadRequestError: 보드가 해당 프로젝트 소속이 아닐 때
                             (Board does not belong to the project)
        """
        if refs.get("status_id") is not None:
            await task_status_service.get_entity(db, refs["status_id"], organization_id)
        if refs.get("priority_id") is not None:
            await task_priority_service.get_entity(db, refs["priority_id"], organization_id)
        if refs.get("project_id") is not None:
            await project_service.get_entity(db, refs["project_id"], organization_id)
        if refs.get("board_id") is not None:
            board: Board = await board_service.get_entity(db, refs["board_id"], organization_id)
            if refs.get("project_id") is None:
                refs["project_id"] = board.project_id
            elif board.project_id != refs["project_id"]:
                raise BadRequestError("Board does not belong to the project")

    def _can_update(self, task: Task, current_user: User, assignee_ids: list[UUID]) -> bool:
        return (
            task.creator_id == current_user.id
            or current_user.is_manager
            or current_user.id in assignee_ids
        )

    async def list_tasks(
        self,
        db: AsyncSession,
        organization_id: UUID,
        params: PageParams,
        status_id: UUID | None = None,
        priority_id: UUID | None = None,
        creator_id: UUID | None = None,
        project_id: UUID | None = None,
        board_id: UUID | None = None,
        assignee_id: UUID | None = None,
        search: str | None = None,
        due_date_from: date | None = None,
        due_date_to: date | None = None,
    ) -> dict[str, Any]:
        """작업 목록 조회 — Paginated task summaries with status/priority names."""
        tasks, total = await task_repository.search(
            db,
            organization_id,
            params,
            status_id=status_id,
            priority_id=priority_id,
            creator_id=creator_id,
            project_id=project_id,
            board_id=board_id,
            assignee_id=assignee_id,
            search=search,
            due_date_from=due_date_from,
            due_date_to=due_date_to,
        )
        return build_page([self._to_summary(t) for t in tasks], total, params)

    async def get_task(
        self,
        db: AsyncSession,
        task_id: UUID,
        organization_id: UUID,
    ) -> TaskDetail:
        return await self._load_detail(db, task_id, organization_id)

    async def create_task(
        self,
        db: AsyncSession,
        current_user: User,
        data: TaskCreate,
    ) -> TaskDetail:
        """새 작업을 생성합니다. 작성자는 요청자.

        Create a task with the caller as creator.
        """
        org_id: UUID = current_user.organization_id
        obj_data: dict[str, Any] = data.model_dump()
        await self._validate_references(db, org_id, obj_data)
        obj_data.update({"organization_id": org_id, "creator_id": current_user.id})

        task: Task = await task_repository.create(db, obj_data)
        return await self._load_detail(db, task.id, org_id)

    async def update_task(
        self,
        db: AsyncSession,
        task_id: UUID,
        current_user: User,
        data: TaskUpdate,
    ) -> TaskDetail:
        """작업을 수정합니다 (작성자, 담당자 또는 관리자).

        Update a task. References are validated against the merged state so
        that moving a task to another board keeps project and board consistent.

        Raises:
            NotFoundError: 작업 또는 참조 대상을 찾을 수 없을 때
            ForbiddenError: 작성자/담당자/관리자가 아닐 때
            BadRequestError: 보드와 프로젝트가 일치하지 않을 때
        """
        org_id: UUID = current_user.organization_id
        task: Task = await self.get_entity(db, task_id, org_id)
        assignee_ids: list[UUID] = await task_repository.assignee_ids(db, task.id)
        if not self._can_update(task, current_user, assignee_ids):
            raise ForbiddenError("Only the creator, an assignee or a manager can update this task")

        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)
        if update_data.get("title", "") is None:
            update_data.pop("title")

        refs: dict[str, Any] = {
            key: update_data.get(key, getattr(task, key))
            for key in ("status_id", "priority_id", "project_id", "board_id")
        }
        # 프로젝트 해제 시 보드도 해제 (Clearing the project also detaches the board)
        if "project_id" in update_data and refs["project_id"] is None and "board_id" not in update_data:
            refs["board_id"] = update_data["board_id"] = None

        # 변경된 참조만 검증, 남은 보드는 (새) 프로젝트와 일치해야 함
        # (Only changed references are validated; a remaining board must match the project)
        to_check: dict[str, Any] = {key: value for key, value in refs.items() if key in update_data}
        if refs["board_id"] is not None and ("project_id" in update_data or "board_id" in update_data):
            to_check["project_id"] = refs["project_id"]
            to_check["board_id"] = refs["board_id"]
        await self._validate_references(db, org_id, to_check)
        if to_check.get("project_id") is not None:
            update_data["project_id"] = to_check["project_id"]

        await task_repository.update(db, task, update_data)
        return await self._load_detail(db, task.id, org_id)

    async def delete_task(
        self,
        db: AsyncSession,
        task_id: UUID,
        current_user: User,
    ) -> None:
        """작업을 소프트 삭제합니다 — 배정, 코멘트, 상태 변경 이력도 함께 삭제.

        Raises:
            NotFoundError: 작업을 찾을 수 없을 때
            ForbiddenError: 작성자/관리자가 아닐 때
        """
        task: Task = await self.get_entity(db, task_id, current_user.organization_id)
        if task.creator_id != current_user.id and not current_user.is_manager:
            raise ForbiddenError("Only the creator or a manager can delete this task")

        await task_assignment_repository.soft_delete_by_task(db, task.id)
        await task_comment_repository.soft_delete_by_task(db, task.id)
        await task_status_change_repository.soft_delete_by_task(db, task.id)
        await task_repository.soft_delete(db, task)


# 싱글턴 인스턴스: Singleton instance
task_service: TaskService = TaskService()
