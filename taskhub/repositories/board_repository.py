"""보드 레포지토리 — 보드 및 보드 멤버 쿼리.

Board Repository — Board search inside a project and board membership queries.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from taskhub.models.project import Board, BoardMember
from taskhub.repositories.base import BaseRepository, contains_ci
from taskhub.utils.pagination import PageParams


class BoardRepository(BaseRepository[Board]):
    """보드 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Board, sortable=("code", "name", "created_at", "updated_at"))

    async def search(
        self,
        db: AsyncSession,
        organization_id: UUID,
        project_id: UUID,
        params: PageParams,
        code: str | None = None,
        name: str | None = None,
        owner_id: UUID | None = None,
    ) -> tuple[Sequence[Board], int]:
        """프로젝트 내 보드를 필터링하여 조회합니다.

        Search boards inside one project by exact code, name substring or owner.
        """
        query: Select = self.base_query(organization_id).where(Board.project_id == project_id)
        if code is not None:
            query = query.where(Board.code == code)
        if name:
            query = query.where(contains_ci(Board.name, name))
        if owner_id is not None:
            query = query.where(Board.owner_id == owner_id)
        return await self.get_paginated(db, query, params)


    async def ids_by_project(self, db: AsyncSession, project_id: UUID) -> list[UUID]:
        """프로젝트의 살아있는 보드 ID 목록 — Live board ids of a project."""
        query: Select = select(Board.id).where(Board.project_id == project_id, Board.deleted_at.is_(None))
        result = await db.execute(query)
        return list(result.scalars().all())


class BoardMemberRepository(BaseRepository[BoardMember]):
    """보드 멤버 레포지토리 — Members are returned with their user loaded."""

    def __init__(self) -> None:
        super().__init__(BoardMember, load_options=(selectinload(BoardMember.user),))

    async def list_by_board(
        self,
        db: AsyncSession,
        organization_id: UUID,
        board_id: UUID,
        params: PageParams,
    ) -> tuple[Sequence[BoardMember], int]:
        """보드의 멤버 목록 — Members of one board."""
        query: Select = self.base_query(organization_id).where(BoardMember.board_id == board_id)
        return await self.get_paginated(db, query, params)

    async def get_in_board(
        self,
        db: AsyncSession,
        organization_id: UUID,
        board_id: UUID,
        member_id: UUID,
    ) -> BoardMember | None:
        """보드 내 멤버 단건 조회 — One membership inside the given board."""
        query: Select = self.base_query(organization_id).options(*self.load_options).where(
            BoardMember.board_id == board_id,
            BoardMember.id == member_id,
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()


# 싱글턴 인스턴스: Singleton instances
board_repository: BoardRepository = BoardRepository()
board_member_repository: BoardMemberRepository = BoardMemberRepository()
