"""알림 수신 설정 서비스.

Notification Preference Service — Each user owns one preference per
notification type. Missing rows are created enabled the first time the user
lists their preferences.
"""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.notification import NotificationPreference, NotificationType
from taskhub.repositories.notification_preference_repository import notification_preference_repository
from taskhub.schemas.notification import NotificationPreferenceResponse, NotificationPreferenceUpdate
from taskhub.utils.exceptions import NotFoundError
from taskhub.utils.pagination import PageParams, build_page


class NotificationPreferenceService:
    """알림 수신 설정 비즈니스 로직을 처리하는 서비스."""

    def _to_response(self, pref: NotificationPreference) -> NotificationPreferenceResponse:
        return NotificationPreferenceResponse(
            id=str(pref.id),
            notification_type=pref.notification_type,
            enabled=pref.enabled,
            created_at=pref.created_at,
            updated_at=pref.updated_at,
        )

    async def ensure_defaults(
        self,
        db: AsyncSession,
        organization_id: UUID,
        user_id: UUID,
    ) -> None:
        """누락된 유형의 기본 설정(수신) 생성 — Create enabled rows for types the user lacks."""
        existing: set[str] = await notification_preference_repository.existing_types(db, user_id)
        missing: list[NotificationType] = [t for t in NotificationType if t.value not in existing]
        for notification_type in missing:
            db.add(NotificationPreference(
                organization_id=organization_id,
                user_id=user_id,
                notification_type=notification_type.value,
                enabled=True,
            ))
        if missing:
            await db.flush()

    async def list_preferences(
        self,
        db: AsyncSession,
        organization_id: UUID,
        user_id: UUID,
        params: PageParams,
        enabled: bool | None = None,
    ) -> dict[str, Any]:
        """내 알림 수신 설정 목록 — Paginated preferences of the caller, defaults included."""
        await self.ensure_defaults(db, organization_id, user_id)
        items, total = await notification_preference_repository.search(
            db, organization_id, user_id, params, enabled=enabled
        )
        return build_page([self._to_response(p) for p in items], total, params)

    async def _get_own(
        self,
        db: AsyncSession,
        preference_id: UUID,
        organization_id: UUID,
        user_id: UUID,
    ) -> NotificationPreference:
        pref: NotificationPreference | None = await notification_preference_repository.get_for_user(
            db, organization_id, user_id, preference_id
        )
        if pref is None:
            raise NotFoundError("Notification preference not found")
        return pref

    async def get_preference(
        self,
        db: AsyncSession,
        preference_id: UUID,
        organization_id: UUID,
        user_id: UUID,
    ) -> NotificationPreferenceResponse:
        return self._to_response(await self._get_own(db, preference_id, organization_id, user_id))

    async def update_preference(
        self,
        db: AsyncSession,
        preference_id: UUID,
        organization_id: UUID,
        user_id: UUID,
        data: NotificationPreferenceUpdate,
    ) -> NotificationPreferenceResponse:
        """알림 유형 수신 여부 변경 (본인만).

        Turn one notification type on or off for the caller.

        Raises:
            NotFoundError: 설정이 없거나 타인의 설정일 때 (Missing or not owned)
        """
        pref: NotificationPreference = await self._get_own(db, preference_id, organization_id, user_id)
        pref = await notification_preference_repository.update(db, pref, {"enabled": data.enabled})
        return self._to_response(pref)


# 싱글턴 인스턴스: Singleton instance
notification_preference_service: NotificationPreferenceService = NotificationPreferenceService()
