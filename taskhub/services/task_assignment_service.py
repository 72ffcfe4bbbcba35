"""작업 배정 서비스 — 작업 담당자 배정/해제 비즈니스 로직.

Task Assignment Service — Managers assign tenant users to tasks. The new
assignee receives a "task_assigned" notification.
"""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.notification import NotificationType
from taskhub.models.task import Task, TaskAssignment
from taskhub.models.user import User
from taskhub.repositories.task_activity_repository import task_assignment_repository
from taskhub.schemas.task import AssignmentCreate, AssignmentResponse
from taskhub.services.notification_service import notification_service
from taskhub.services.task_service import task_service
from taskhub.services.user_service import user_service
from taskhub.utils.exceptions import DuplicateError, NotFoundError
from taskhub.utils.pagination import PageParams, build_page


class TaskAssignmentService:
    """작업 배정 관련 비즈니스 로직을 처리하는 서비스."""

    def _to_response(self, assignment: TaskAssignment) -> AssignmentResponse:
        return AssignmentResponse(
            id=str(assignment.id),
            task_id=str(assignment.task_id),
            assignee_id=str(assignment.assignee_id),
            assignee_name=assignment.assignee.name,
            assigned_at=assignment.assigned_at,
            created_at=assignment.created_at,
        )

    async def _get(
        self,
        db: AsyncSession,
        organization_id: UUID,
        task_id: UUID,
        assignment_id: UUID,
    ) -> TaskAssignment:
        assignment: TaskAssignment | None = await task_assignment_repository.get_in_task(
            db, organization_id, task_id, assignment_id
        )
        if assignment is None:
            raise NotFoundError("Task assignment not found")
        return assignment

    async def list_assignments(
        self,
        db: AsyncSession,
        task_id: UUID,
        organization_id: UUID,
        params: PageParams,
    ) -> dict[str, Any]:
        """작업의 배정 목록 — Paginated assignments of a task."""
        task: Task = await task_service.get_entity(db, task_id, organization_id)
        items, total = await task_assignment_repository.list_by_task(db, organization_id, task.id, params)
        return build_page([self._to_response(a) for a in items], total, params)

    async def get_assignment(
        self,
        db: AsyncSession,
        task_id: UUID,
        assignment_id: UUID,
        organization_id: UUID,
    ) -> AssignmentResponse:
        return self._to_response(await self._get(db, organization_id, task_id, assignment_id))

    async def create_assignment(
        self,
        db: AsyncSession,
        task_id: UUID,
        current_user: User,
        data: AssignmentCreate,
    ) -> AssignmentResponse:
        """작업에 담당자를 배정하고 알림을 보냅니다.

        Assign a tenant user to a task and notify them.

        Raises:
            NotFoundError: 작업 또는 사용자를 찾을 수 없을 때
            DuplicateError: 이미 배정된 사용자일 때 (Active assignment exists)
        """
        org_id: UUID = current_user.organization_id
        task: Task = await task_service.get_entity(db, task_id, org_id)
        await user_service.get_tenant_user(db, data.assignee_id, org_id)
        if await task_assignment_repository.exists(
            db, {"task_id": task.id, "assignee_id": data.assignee_id}, org_id
        ):
            raise DuplicateError("User is already assigned to this task")

        assignment: TaskAssignment = await task_assignment_repository.create(
            db,
            {"organization_id": org_id, "task_id": task.id, "assignee_id": data.assignee_id},
        )
        await notification_service.notify(
            db,
            org_id,
            [data.assignee_id],
            type=NotificationType.TASK_ASSIGNED.value,
            message=f"You have been assigned to task: {task.title}",
            reference_type="task",
            reference_id=task.id,
        )
        return self._to_response(await self._get(db, org_id, task.id, assignment.id))

    async def delete_assignment(
        self,
        db: AsyncSession,
        task_id: UUID,
        assignment_id: UUID,
        organization_id: UUID,
    ) -> None:
        """배정을 해제합니다 (소프트 삭제)."""
        assignment: TaskAssignment = await self._get(db, organization_id, task_id, assignment_id)
        await task_assignment_repository.soft_delete(db, assignment)


# 싱글턴 인스턴스: Singleton instance
task_assignment_service: TaskAssignmentService = TaskAssignmentService()
