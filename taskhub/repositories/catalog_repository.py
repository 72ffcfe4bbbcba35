"""카탈로그 레포지토리 — 작업 상태 및 우선순위.

Catalog Repository — Task statuses and task priorities share one shape,
so one repository class serves both tables.
"""

from typing import Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.catalog import TaskPriority, TaskStatus
from taskhub.repositories.base import BaseRepository, contains_ci
from taskhub.utils.pagination import PageParams

CatalogModel = TypeVar("CatalogModel", TaskStatus, TaskPriority)


class CatalogRepository(BaseRepository[CatalogModel]):
    """작업 상태/우선순위 테이블 레포지토리."""

    def __init__(self, model: type[CatalogModel]) -> None:
        super().__init__(model, sortable=("code", "name", "created_at"))

    async def search(
        self,
        db: AsyncSession,
        organization_id: UUID,
        params: PageParams,
        code: str | None = None,
        name: str | None = None,
    ) -> tuple[Sequence[CatalogModel], int]:
        """코드(정확히 일치)/이름(부분 일치)으로 검색합니다.

        Search by exact code and/or case-insensitive name substring.
        """
        query: Select = self.base_query(organization_id)
        if code is not None:
            query = query.where(self.model.code == code)
        if name:
            query = query.where(contains_ci(self.model.name, name))
        return await self.get_paginated(db, query, params)

    async def get_by_code(
        self,
        db: AsyncSession,
        organization_id: UUID,
        code: str,
    ) -> CatalogModel | None:
        """코드로 살아있는 항목을 조회합니다 — Live row by code."""
        result = await db.execute(self.base_query(organization_id).where(self.model.code == code))
        return result.scalar_one_or_none()


# 싱글턴 인스턴스: Singleton instances
task_status_repository: CatalogRepository[TaskStatus] = CatalogRepository(TaskStatus)
task_priority_repository: CatalogRepository[TaskPriority] = CatalogRepository(TaskPriority)
