"""조직 서비스 — 현재 테넌트 조회 및 수정."""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.organization import Organization
from taskhub.repositories.organization_repository import organization_repository
from taskhub.schemas.organization import OrganizationResponse, OrganizationUpdate
from taskhub.utils.exceptions import NotFoundError


class OrganizationService:
    """조직 관련 비즈니스 로직을 처리하는 서비스."""

    def _to_response(self, org: Organization) -> OrganizationResponse:
        return OrganizationResponse(
            id=str(org.id),
            name=org.name,
            code=org.code,
            is_active=org.is_active,
            created_at=org.created_at,
            updated_at=org.updated_at,
        )

    async def _get(self, db: AsyncSession, organization_id: UUID) -> Organization:
        org: Organization | None = await organization_repository.get_by_id(db, organization_id)
        if org is None:
            raise NotFoundError("Organization not found")
        return org

    async def get_organization(
        self,
        db: AsyncSession,
        organization_id: UUID,
    ) -> OrganizationResponse:
        """현재 조직 조회 — The caller's tenant."""
        return self._to_response(await self._get(db, organization_id))

    async def update_organization(
        self,
        db: AsyncSession,
        organization_id: UUID,
        data: OrganizationUpdate,
    ) -> OrganizationResponse:
        """조직 이름/활성 상태 수정 — Rename or toggle is_active.

        null 값은 무시합니다 (Null fields are ignored).
        """
        org: Organization = await self._get(db, organization_id)
        update_data: dict[str, Any] = {
            k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None
        }
        org = await organization_repository.update(db, org, update_data)
        return self._to_response(org)


# 싱글턴 인스턴스: Singleton instance
organization_service: OrganizationService = OrganizationService()
