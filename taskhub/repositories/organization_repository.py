"""조직 레포지토리 — 조직(테넌트) 조회 및 생성.

Organization Repository — Tenant lookup by id and by company code.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.organization import Organization
from taskhub.repositories.base import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    """조직 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Organization)

    async def get_by_code(
        self,
        db: AsyncSession,
        code: str,
    ) -> Organization | None:
        """회사 코드로 조직을 조회합니다 (대소문자 무시).

        Retrieve an organization by its company code (case-insensitive).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            code: 회사 코드 (Company code)

        Returns:
            Organization | None: 조회된 조직 또는 None (Found organization or None)
        """
        query: Select = select(Organization).where(Organization.code == code.strip().upper())
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def code_exists(self, db: AsyncSession, code: str) -> bool:
        """회사 코드 사용 여부 — Whether a company code is already taken."""
        return await self.get_by_code(db, code) is not None


# 싱글턴 인스턴스: Singleton instance
organization_repository: OrganizationRepository = OrganizationRepository()
