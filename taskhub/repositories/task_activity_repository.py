"""작업 하위 리소스 레포지토리 — 배정, 코멘트, 상태 변경.

Task child-resource repositories — Assignments, comments and status changes.
Every query is restricted to one parent task.
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskhub.models.task import TaskAssignment, TaskComment, TaskStatusChange
from taskhub.repositories.base import BaseRepository, ModelType, contains_ci
from taskhub.utils.pagination import PageParams


class TaskChildRepository(BaseRepository[ModelType]):
    """작업 하위 리소스 공통 레포지토리 — Shared task-scoped lookups."""

    def for_task(self, organization_id: UUID, task_id: UUID) -> Select:
        """작업 범위 기본 쿼리 — Live rows of one task in the tenant."""
        return self.base_query(organization_id).where(self.model.task_id == task_id)

    async def get_in_task(
        self,
        db: AsyncSession,
        organization_id: UUID,
        task_id: UUID,
        record_id: UUID,
    ) -> ModelType | None:
        """작업 내 단건 조회 — One row that belongs to the given task."""
        query: Select = (
            self.for_task(organization_id, task_id)
            .options(*self.load_options)
            .where(self.model.id == record_id)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def soft_delete_by_task(self, db: AsyncSession, task_id: UUID) -> None:
        """작업 삭제 시 하위 리소스 일괄 소프트 삭제 — Cascade a task deletion."""
        await self.soft_delete_where(db, self.model.task_id == task_id)


class TaskAssignmentRepository(TaskChildRepository[TaskAssignment]):
    """작업 배정 레포지토리."""

    def __init__(self) -> None:
        super().__init__(
            TaskAssignment,
            sortable=("assigned_at", "created_at"),
            load_options=(selectinload(TaskAssignment.assignee),),
        )

    async def list_by_task(
        self,
        db: AsyncSession,
        organization_id: UUID,
        task_id: UUID,
        params: PageParams,
    ) -> tuple[Sequence[TaskAssignment], int]:
        """작업의 배정 목록 — Assignments of one task."""
        return await self.get_paginated(db, self.for_task(organization_id, task_id), params)


class TaskCommentRepository(TaskChildRepository[TaskComment]):
    """작업 코멘트 레포지토리."""

    def __init__(self) -> None:
        super().__init__(TaskComment, sortable=("created_at", "updated_at"))

    async def search(
        self,
        db: AsyncSession,
        organization_id: UUID,
        task_id: UUID,
        params: PageParams,
        commenter_id: UUID | None = None,
        search: str | None = None,
        created_at_from: datetime | None = None,
        created_at_to: datetime | None = None,
    ) -> tuple[Sequence[TaskComment], int]:
        """작업 코멘트를 필터링하여 조회합니다.

        Search comments of a task by author, body substring and creation window.
        """
        query: Select = self.for_task(organization_id, task_id)
        if commenter_id is not None:
            query = query.where(TaskComment.commenter_id == commenter_id)
        if search:
            query = query.where(contains_ci(TaskComment.comment_body, search))
        if created_at_from is not None:
            query = query.where(TaskComment.created_at >= created_at_from)
        if created_at_to is not None:
            query = query.where(TaskComment.created_at <= created_at_to)
        return await self.get_paginated(db, query, params)


class TaskStatusChangeRepository(TaskChildRepository[TaskStatusChange]):
    """작업 상태 변경 이력 레포지토리."""

    def __init__(self) -> None:
        super().__init__(
            TaskStatusChange,
            sortable=("changed_at", "created_at"),
            load_options=(selectinload(TaskStatusChange.new_status),),
        )

    async def search(
        self,
        db: AsyncSession,
        organization_id: UUID,
        task_id: UUID,
        params: PageParams,
        new_status_id: UUID | None = None,
        changed_by_id: UUID | None = None,
        changed_from: datetime | None = None,
        changed_to: datetime | None = None,
    ) -> tuple[Sequence[TaskStatusChange], int]:
        """상태 변경 이력을 필터링하여 조회합니다.

        Search status changes of a task by target status, author and changed_at window.
        """
        query: Select = self.for_task(organization_id, task_id)
        if new_status_id is not None:
            query = query.where(TaskStatusChange.new_status_id == new_status_id)
        if changed_by_id is not None:
            query = query.where(TaskStatusChange.changed_by_id == changed_by_id)
        if changed_from is not None:
            query = query.where(TaskStatusChange.changed_at >= changed_from)
        if changed_to is not None:
            query = query.where(TaskStatusChange.changed_at <= changed_to)
        return await self.get_paginated(db, query, params)


# 싱글턴 인스턴스: Singleton instances
task_assignment_repository: TaskAssignmentRepository = TaskAssignmentRepository()
task_comment_repository: TaskCommentRepository = TaskCommentRepository()
task_status_change_repository: TaskStatusChangeRepository = TaskStatusChangeRepository()
