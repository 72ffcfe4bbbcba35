"""작업 레포지토리 — 작업 검색 및 상세 조회.

Task Repository — Task search with multi-field filters and detail loading.
Summaries and details are returned with status/priority eager-loaded.
"""

from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskhub.models.task import Task, TaskAssignment
from taskhub.repositories.base import BaseRepository, contains_ci
from taskhub.utils.pagination import PageParams


class TaskRepository(BaseRepository[Task]):
    """작업 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the tasks table.
    """

    def __init__(self) -> None:
        super().__init__(
            Task,
            sortable=("title", "due_date", "created_at", "updated_at"),
            load_options=(
                selectinload(Task.status),
                selectinload(Task.priority),
                selectinload(Task.assignments),
            ),
        )

    async def search(
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
    ) -> tuple[Sequence[Task], int]:
        """조직 내 작업을 필터링하여 페이지 단위로 조회합니다.

        Search tasks in the organization. Every filter is optional and
        filters combine with AND.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            organization_id: 조직 ID (Organization UUID)
            params: 페이지/정렬 파라미터 (Page and sort parameters)
            status_id: 상태 필터 (Status filter)
            priority_id: 우선순위 필터 (Priority filter)
            creator_id: 작성자 필터 (Creator filter)
            project_id: 프로젝트 필터 (Project filter)
            board_id: 보드 필터 (Board filter)
            assignee_id: 담당자 필터 — 활성 배정만 (Active assignment to this user)
            search: 제목 부분 검색어 (Title substring, case-insensitive)
            due_date_from: 마감일 하한, 포함 (Inclusive lower bound)
            due_date_to: 마감일 상한, 포함 (Inclusive upper bound)

        Returns:
            tuple[Sequence[Task], int]: (작업 목록, 전체 개수)
        """
        query: Select = self.base_query(organization_id)
        if status_id is not None:
            query = query.where(Task.status_id == status_id)
        if priority_id is not None:
            query = query.where(Task.priority_id == priority_id)
        if creator_id is not None:
            query = query.where(Task.creator_id == creator_id)
        if project_id is not None:
            query = query.where(Task.project_id == project_id)
        if board_id is not None:
            query = query.where(Task.board_id == board_id)
        if assignee_id is not None:
            query = query.where(
                exists().where(
                    TaskAssignment.task_id == Task.id,
                    TaskAssignment.assignee_id == assignee_id,
                    TaskAssignment.deleted_at.is_(None),
                )
            )
        if search:
            query = query.where(contains_ci(Task.title, search))
        if due_date_from is not None:
            query = query.where(Task.due_date >= due_date_from)
        if due_date_to is not None:
            query = query.where(Task.due_date <= due_date_to)
        return await self.get_paginated(db, query, params)

    async def get_detail(
        self,
        db: AsyncSession,
        task_id: UUID,
        organization_id: UUID,
    ) -> Task | None:
        """작업 상세 조회 — 상태/우선순위/배정을 새로 로드.

        Retrieve a task with status, priority and assignments freshly loaded,
        overwriting relationships already cached in the session.
        """
        query: Select = (
            self.base_query(organization_id)
            .options(*self.load_options)
            .where(Task.id == task_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def assignee_ids(
        self,
        db: AsyncSession,
        task_id: UUID,
    ) -> list[UUID]:
        """작업의 활성 담당자 ID 목록 — Assignee ids of live assignments."""
        query: Select = select(TaskAssignment.assignee_id).where(
            TaskAssignment.task_id == task_id,
            TaskAssignment.deleted_at.is_(None),
        )
        result = await db.execute(query)
        return list(result.scalars().all())


# 싱글턴 인스턴스: Singleton instance
task_repository: TaskRepository = TaskRepository()
