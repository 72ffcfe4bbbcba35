"""사용자 레포지토리 — 사용자 조회, 검색, 이메일 중복 확인.

User Repository — Lookup, search and email uniqueness checks for users.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.user import User
from taskhub.repositories.base import BaseRepository, contains_ci
from taskhub.utils.pagination import PageParams


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User, sortable=("name", "email", "created_at"))

    async def get_by_email(
        self,
        db: AsyncSession,
        email: str,
    ) -> User | None:
        """이메일로 활성(미삭제) 사용자를 조회합니다.

        Retrieve a live user by email. Soft-deleted users are not returned,
        so they cannot log in.
        """
        query: Select = self.base_query().where(User.email == email.strip().lower())
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def email_taken(self, db: AsyncSession, email: str) -> bool:
        """이메일 사용 여부 — 삭제된 계정 포함.

        Whether an email is already used by any account, deleted or not
        (users.email carries a unique constraint).
        """
        query: Select = select(func.count()).select_from(User).where(User.email == email.strip().lower())
        count: int = (await db.execute(query)).scalar() or 0
        return count > 0

    async def search(
        self,
        db: AsyncSession,
        organization_id: UUID,
        params: PageParams,
        role: str | None = None,
        search: str | None = None,
    ) -> tuple[Sequence[User], int]:
        """조직 내 사용자를 필터링하여 페이지 단위로 조회합니다.

        Search users in the organization.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            organization_id: 조직 ID (Organization UUID)
            params: 페이지/정렬 파라미터 (Page and sort parameters)
            role: 역할 필터 (Role filter, optional)
            search: 이름/이메일 부분 검색어 (Name/email substring, case-insensitive)

        Returns:
            tuple[Sequence[User], int]: (사용자 목록, 전체 개수)
        """
        query: Select = self.base_query(organization_id)
        if role is not None:
            query = query.where(User.role == role)
        if search:
            query = query.where(or_(contains_ci(User.name, search), contains_ci(User.email, search)))
        return await self.get_paginated(db, query, params)


# 싱글턴 인스턴스: Singleton instance
user_repository: UserRepository = UserRepository()
