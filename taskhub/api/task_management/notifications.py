"""알림 라우터 — 내 알림 조회 및 읽음 처리.

Notification Router — Every endpoint only sees the caller's own notifications.
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.deps import get_current_user
from taskhub.database import get_db
from taskhub.models.user import User
from taskhub.schemas.notification import NotificationResponse, NotificationUpdate, ReadAllResponse
from taskhub.services.notification_service import notification_service
from taskhub.utils.pagination import Page, PageParams

router: APIRouter = APIRouter()


@router.get("", response_model=Page[NotificationResponse])
async def list_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    params: Annotated[PageParams, Depends()],
    is_read: Annotated[bool | None, Query()] = None,
) -> dict[str, Any]:
    """내 알림 목록을 조회합니다."""
    return await notification_service.list_notifications(
        db, current_user.organization_id, current_user.id, params, is_read=is_read
    )


@router.post("/read-all", response_model=ReadAllResponse)
async def read_all(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ReadAllResponse:
    """모든 알림을 읽음 처리합니다."""
    result: ReadAllResponse = await notification_service.read_all(
        db, current_user.organization_id, current_user.id
    )
    await db.commit()
    return result


@router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(
    notification_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> NotificationResponse:
    return await notification_service.get_notification(
        db, notification_id, current_user.organization_id, current_user.id
    )


@router.put("/{notification_id}", response_model=NotificationResponse)
async def update_notification(
    notification_id: UUID,
    data: NotificationUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> NotificationResponse:
    """알림을 읽음/안읽음으로 표시합니다."""
    result: NotificationResponse = await notification_service.update_notification(
        db, notification_id, current_user.organization_id, current_user.id, data
    )
    await db.commit()
    return result


@router.delete("/{notification_id}", status_code=204)
async def delete_notification(
    notification_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> None:
    await notification_service.delete_notification(
        db, notification_id, current_user.organization_id, current_user.id
    )
    await db.commit()
