"""알림 서비스 — 알림 생성, 조회, 읽음 처리 비즈니스 로직.

Notification Service — Creates in-app notifications for task events and
lets each user read, mark and delete their own notifications.
"""

from typing import Any, Iterable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.database import utcnow
from taskhub.models.notification import Notification
from taskhub.repositories.notification_preference_repository import notification_preference_repository
from taskhub.repositories.notification_repository import notification_repository
from taskhub.schemas.notification import NotificationResponse, NotificationUpdate, ReadAllResponse
from taskhub.utils.exceptions import NotFoundError
from taskhub.utils.pagination import PageParams, build_page


class NotificationService:
    """알림 관련 비즈니스 로직을 처리하는 서비스."""

    def _to_response(self, n: Notification) -> NotificationResponse:
        return NotificationResponse(
            id=str(n.id),
            type=n.type,
            message=n.message,
            reference_type=n.reference_type,
            reference_id=str(n.reference_id) if n.reference_id else None,
            is_read=n.is_read,
            read_at=n.read_at,
            created_at=n.created_at,
        )

    async def notify(
        self,
        db: AsyncSession,
        organization_id: UUID,
        user_ids: Iterable[UUID],
        type: str,
        message: str,
        reference_type: str | None = None,
        reference_id: UUID | None = None,
    ) -> int:
        """여러 사용자에게 알림을 생성합니다 (중복 수신자 제거, 수신 거부자 제외).

        Create one notification per distinct recipient, skipping recipients
        whose preference for this type is disabled.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            organization_id: 조직 ID (Organization UUID)
            user_ids: 수신자 ID 목록 (Recipients; duplicates are collapsed)
            type: 알림 유형 (Notification type)
            message: 표시 메시지 (Display message)
            reference_type: 참조 엔티티 유형 (Entity type for deep-linking)
            reference_id: 참조 엔티티 UUID (Entity UUID for deep-linking)

        Returns:
            int: 생성된 알림 수 (Number of notifications created)
        """
        candidates: list[UUID] = list(dict.fromkeys(user_ids))
        muted: set[UUID] = await notification_preference_repository.disabled_user_ids(db, candidates, type)
        recipients: list[UUID] = [user_id for user_id in candidates if user_id not in muted]
        for user_id in recipients:
            db.add(Notification(
                organization_id=organization_id,
                user_id=user_id,
                type=type,
                message=message,
                reference_type=reference_type,
                reference_id=reference_id,
            ))
        if recipients:
            await db.flush()
        return len(recipients)

    async def _get_own(
        self,
        db: AsyncSession,
        notification_id: UUID,
        organization_id: UUID,
        user_id: UUID,
    ) -> Notification:
        notification: Notification | None = await notification_repository.get_for_user(
            db, organization_id, user_id, notification_id
        )
        if notification is None:
            raise NotFoundError("Notification not found")
        return notification

    async def list_notifications(
        self,
        db: AsyncSession,
        organization_id: UUID,
        user_id: UUID,
        params: PageParams,
        is_read: bool | None = None,
    ) -> dict[str, Any]:
        """내 알림 목록 — Paginated notifications of the caller."""
        items, total = await notification_repository.search(
            db, organization_id, user_id, params, is_read=is_read
        )
        return build_page([self._to_response(n) for n in items], total, params)

    async def get_notification(
        self,
        db: AsyncSession,
        notification_id: UUID,
        organization_id: UUID,
        user_id: UUID,
    ) -> NotificationResponse:
        return self._to_response(await self._get_own(db, notification_id, organization_id, user_id))

    async def update_notification(
        self,
        db: AsyncSession,
        notification_id: UUID,
        organization_id: UUID,
        user_id: UUID,
        data: NotificationUpdate,
    ) -> NotificationResponse:
        """읽음/안읽음 표시 — Mark one notification read or unread."""
        notification: Notification = await self._get_own(db, notification_id, organization_id, user_id)
        notification = await notification_repository.update(
            db,
            notification,
            {"is_read": data.is_read, "read_at": utcnow() if data.is_read else None},
        )
        return self._to_response(notification)

    async def read_all(
        self,
        db: AsyncSession,
        organization_id: UUID,
        user_id: UUID,
    ) -> ReadAllResponse:
        """모든 알림 읽음 처리 — Mark every unread notification of the caller read."""
        updated: int = await notification_repository.mark_all_read(db, organization_id, user_id)
        return ReadAllResponse(updated=updated)

    async def delete_notification(
        self,
        db: AsyncSession,
        notification_id: UUID,
        organization_id: UUID,
        user_id: UUID,
    ) -> None:
        notification: Notification = await self._get_own(db, notification_id, organization_id, user_id)
        await notification_repository.soft_delete(db, notification)


# 싱글턴 인스턴스: Singleton instance
notification_service: NotificationService = NotificationService()
