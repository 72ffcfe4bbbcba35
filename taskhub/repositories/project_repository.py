"""프로젝트 레포지토리 — 프로젝트 및 프로젝트 멤버 쿼리.

Project Repository — Project search and project membership queries.
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskhub.models.project import Project, ProjectMember
from taskhub.repositories.base import BaseRepository, contains_ci
from taskhub.utils.pagination import PageParams


class ProjectRepository(BaseRepository[Project]):
    """프로젝트 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Project, sortable=("code", "name", "created_at", "updated_at"))

    async def search(
        self,
        db: AsyncSession,
        organization_id: UUID,
        params: PageParams,
        owner_id: UUID | None = None,
        code: str | None = None,
        name: str | None = None,
        search: str | None = None,
        created_at_from: datetime | None = None,
        created_at_to: datetime | None = None,
    ) -> tuple[Sequence[Project], int]:
        """조직 내 프로젝트를 필터링하여 조회합니다.

        Search projects in the organization.

        Args:
            owner_id: 소유자 필터 (Owner filter)
            code: 코드 정확히 일치 (Exact code)
            name: 이름 부분 일치 (Name substring)
            search: 코드/이름/설명 부분 일치 (Substring over code, name and description)
            created_at_from: 생성일 하한, 포함 (Inclusive lower bound)
            created_at_to: 생성일 상한, 포함 (Inclusive upper bound)
        """
        query: Select = self.base_query(organization_id)
        if owner_id is not None:
            query = query.where(Project.owner_id == owner_id)
        if code is not None:
            query = query.where(Project.code == code)
        if name:
            query = query.where(contains_ci(Project.name, name))
        if search:
            query = query.where(
                or_(
                    contains_ci(Project.code, search),
                    contains_ci(Project.name, search),
                    contains_ci(Project.description, search),
                )
            )
        if created_at_from is not None:
            query = query.where(Project.created_at >= created_at_from)
        if created_at_to is not None:
            query = query.where(Project.created_at <= created_at_to)
        return await self.get_paginated(db, query, params)


class ProjectMemberRepository(BaseRepository[ProjectMember]):
    """프로젝트 멤버 레포지토리 — Members are returned with their user loaded."""

    def __init__(self) -> None:
        super().__init__(ProjectMember, load_options=(selectinload(ProjectMember.user),))

    async def list_by_project(
        self,
        db: AsyncSession,
        organization_id: UUID,
        project_id: UUID,
        params: PageParams,
    ) -> tuple[Sequence[ProjectMember], int]:
        """프로젝트의 멤버 목록 — Members of one project."""
        query: Select = self.base_query(organization_id).where(ProjectMember.project_id == project_id)
        return await self.get_paginated(db, query, params)

    async def get_in_project(
        self,
        db: AsyncSession,
        organization_id: UUID,
        project_id: UUID,
        member_id: UUID,
    ) -> ProjectMember | None:
        """프로젝트 내 멤버 단건 조회 — One membership inside the given project."""
        query: Select = self.base_query(organization_id).options(*self.load_options).where(
            ProjectMember.project_id == project_id,
            ProjectMember.id == member_id,
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()


# 싱글턴 인스턴스: Singleton instances
project_repository: ProjectRepository = ProjectRepository()
project_member_repository: ProjectMemberRepository = ProjectMemberRepository()
