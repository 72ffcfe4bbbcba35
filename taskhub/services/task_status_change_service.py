"""작업 상태 변경 서비스 — 상태 전이 기록 비즈니스 로직.

Task Status Change Service — Recording a status change moves the task to
the new status and notifies the task creator and assignees except the
author. Editing or deleting history never touches the task's current status.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.database import utcnow
from taskhub.models.catalog import TaskStatus
from taskhub.models.notification import NotificationType
from taskhub.models.task import Task, TaskStatusChange
from taskhub.models.user import User
from taskhub.repositories.task_activity_repository import task_status_change_repository
from taskhub.repositories.task_repository import task_repository
from taskhub.schemas.task import StatusChangeCreate, StatusChangeResponse, StatusChangeUpdate
from taskhub.services.catalog_service import task_status_service
from taskhub.services.notification_service import notification_service
from taskhub.services.task_service import task_service
from taskhub.utils.exceptions import ForbiddenError, NotFoundError
from taskhub.utils.pagination import PageParams, build_page


class TaskStatusChangeService:
    """작업 상태 변경 관련 비즈니스 로직을 처리하는 서비스."""

    def _to_response(self, change: TaskStatusChange) -> StatusChangeResponse:
        new_status: TaskStatus | None = change.new_status
        return StatusChangeResponse(
            id=str(change.id),
            task_id=str(change.task_id),
            new_status_id=str(change.new_status_id),
            new_status_name=new_status.name if new_status is not None and new_status.deleted_at is None else None,
            changed_by_id=str(change.changed_by_id),
            changed_at=change.changed_at,
            comment=change.comment,
            created_at=change.created_at,
        )

    async def _get(
        self,
        db: AsyncSession,
        organization_id: UUID,
        task_id: UUID,
        change_id: UUID,
    ) -> TaskStatusChange:
        change: TaskStatusChange | None = await task_status_change_repository.get_in_task(
            db, organization_id, task_id, change_id
        )
        if change is None:
            raise NotFoundError("Status change not found")
        return change

    async def _get_modifiable(
        self,
        db: AsyncSession,
        task_id: UUID,
        change_id: UUID,
        current_user: User,
    ) -> TaskStatusChange:
        change: TaskStatusChange = await self._get(db, current_user.organization_id, task_id, change_id)
        if change.changed_by_id != current_user.id and not current_user.is_manager:
            raise ForbiddenError("Only the author or a manager can modify this status change")
        return change

    async def list_status_changes(
        self,
        db: AsyncSession,
        task_id: UUID,
        organization_id: UUID,
        params: PageParams,
        new_status_id: UUID | None = None,
        changed_by_id: UUID | None = None,
        changed_from: datetime | None = None,
        changed_to: datetime | None = None,
    ) -> dict[str, Any]:
        """상태 변경 이력 목록 — Paginated status history of a task."""
        task: Task = await task_service.get_entity(db, task_id, organization_id)
        items, total = await task_status_change_repository.search(
            db,
            organization_id,
            task.id,
            params,
            new_status_id=new_status_id,
            changed_by_id=changed_by_id,
            changed_from=changed_from,
            changed_to=changed_to,
        )
        return build_page([self._to_response(c) for c in items], total, params)

    async def get_status_change(
        self,
        db: AsyncSession,
        task_id: UUID,
        change_id: UUID,
        organization_id: UUID,
    ) -> StatusChangeResponse:
        return self._to_response(await self._get(db, organization_id, task_id, change_id))

    async def create_status_change(
        self,
        db: AsyncSession,
        task_id: UUID,
        current_user: User,
        data: StatusChangeCreate,
    ) -> StatusChangeResponse:
        """상태 변경을 기록하고 작업 상태를 갱신합니다.

        Record a status change, move the task to the new status and notify.

        Raises:
            NotFoundError: 작업 또는 상태를 찾을 수 없을 때
        """
        org_id: UUID = current_user.organization_id
        task: Task = await task_service.get_entity(db, task_id, org_id)
        status: TaskStatus = await task_status_service.get_entity(db, data.new_status_id, org_id)

        change: TaskStatusChange = await task_status_change_repository.create(
            db,
            {
                "organization_id": org_id,
                "task_id": task.id,
                "new_status_id": status.id,
                "changed_by_id": current_user.id,
                "changed_at": data.changed_at or utcnow(),
                "comment": data.comment,
            },
        )
        await task_repository.update(db, task, {"status_id": status.id})

        recipients: list[UUID] = [task.creator_id, *await task_repository.assignee_ids(db, task.id)]
        await notification_service.notify(
            db,
            org_id,
            [user_id for user_id in recipients if user_id != current_user.id],
            type=NotificationType.TASK_STATUS_CHANGED.value,
            message=f"Task {task.title} moved to {status.name}",
            reference_type="task",
            reference_id=task.id,
        )
        return self._to_response(await self._get(db, org_id, task.id, change.id))

    async def update_status_change(
        self,
        db: AsyncSession,
        task_id: UUID,
        change_id: UUID,
        current_user: User,
        data: StatusChangeUpdate,
    ) -> StatusChangeResponse:
        """상태 변경 이력의 코멘트/시각을 수정합니다 (작성자 또는 관리자)."""
        change: TaskStatusChange = await self._get_modifiable(db, task_id, change_id, current_user)
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)
        if update_data.get("changed_at", "") is None:
            update_data.pop("changed_at")
        change = await task_status_change_repository.update(db, change, update_data)
        return self._to_response(await self._get(db, current_user.organization_id, task_id, change.id))

    async def delete_status_change(
        self,
        db: AsyncSession,
        task_id: UUID,
        change_id: UUID,
        current_user: User,
    ) -> None:
        """상태 변경 이력을 소프트 삭제합니다 (작성자 또는 관리자)."""
        change: TaskStatusChange = await self._get_modifiable(db, task_id, change_id, current_user)
        await task_status_change_repository.soft_delete(db, change)


# 싱글턴 인스턴스: Singleton instance
task_status_change_service: TaskStatusChangeService = TaskStatusChangeService()
