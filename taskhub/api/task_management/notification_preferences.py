"""알림 수신 설정 라우터 — 내 알림 유형별 수신 여부.

Notification Preference Router — Every endpoint only sees the caller's own
preferences.
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.deps import get_current_user
from taskhub.database import get_db
from taskhub.models.user import User
from taskhub.schemas.notification import NotificationPreferenceResponse, NotificationPreferenceUpdate
from taskhub.services.notification_preference_service import notification_preference_service
from taskhub.utils.pagination import Page, PageParams

router: APIRouter = APIRouter()


@router.get("", response_model=Page[NotificationPreferenceResponse])
async def list_notification_preferences(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    params: Annotated[PageParams, Depends()],
    enabled: Annotated[bool | None, Query()] = None,
) -> dict[str, Any]:
    """내 알림 수신 설정 목록을 조회합니다. 누락된 유형은 수신으로 생성."""
    result: dict[str, Any] = await notification_preference_service.list_preferences(
        db, current_user.organization_id, current_user.id, params, enabled=enabled
    )
    await db.commit()
    return result


@router.get("/{preference_id}", response_model=NotificationPreferenceResponse)
async def get_notification_preference(
    preference_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> NotificationPreferenceResponse:
    return await notification_preference_service.get_preference(
        db, preference_id, current_user.organization_id, current_user.id
    )


@router.put("/{preference_id}", response_model=NotificationPreferenceResponse)
async def update_notification_preference(
    preference_id: UUID,
    data: NotificationPreferenceUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> NotificationPreferenceResponse:
    """알림 유형의 수신 여부를 변경합니다."""
    result: NotificationPreferenceResponse = await notification_preference_service.update_preference(
        db, preference_id, current_user.organization_id, current_user.id, data
    )
    await db.commit()
    return result
