"""조직 라우터 — 현재 테넌트 조회/수정.

Organization Router — Read the caller's tenant; pmo may rename it or
toggle is_active.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.deps import get_current_user, require_pmo
from taskhub.database import get_db
from taskhub.models.user import User
from taskhub.schemas.organization import OrganizationResponse, OrganizationUpdate
from taskhub.services.organization_service import organization_service

router: APIRouter = APIRouter()


@router.get("", response_model=OrganizationResponse)
async def get_organization(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> OrganizationResponse:
    """현재 조직 정보를 조회합니다."""
    return await organization_service.get_organization(db, current_user.organization_id)


@router.put("", response_model=OrganizationResponse)
async def update_organization(
    data: OrganizationUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_pmo)],
) -> OrganizationResponse:
    """조직 정보를 수정합니다. pmo만 가능.

    Update the current organization. pmo only.
    """
    result: OrganizationResponse = await organization_service.update_organization(
        db, current_user.organization_id, data
    )
    await db.commit()
    return result
