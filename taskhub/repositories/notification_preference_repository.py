"""알림 수신 설정 레포지토리.

Notification Preference Repository — Per-user preference rows and the
lookup notify() uses to skip recipients who turned a type off.
"""

from typing import Iterable, Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.notification import NotificationPreference
from taskhub.repositories.base import BaseRepository
from taskhub.utils.pagination import PageParams


class NotificationPreferenceRepository(BaseRepository[NotificationPreference]):
    """알림 수신 설정 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(NotificationPreference, sortable=("notification_type", "created_at", "updated_at"))

    def for_user(self, organization_id: UUID, user_id: UUID) -> Select:
        """소유자 범위 기본 쿼리 — Preferences of one user."""
        return self.base_query(organization_id).where(NotificationPreference.user_id == user_id)

    async def search(
        self,
        db: AsyncSession,
        organization_id: UUID,
        user_id: UUID,
        params: PageParams,
        enabled: bool | None = None,
    ) -> tuple[Sequence[NotificationPreference], int]:
        query: Select = self.for_user(organization_id, user_id)
        if enabled is not None:
            query = query.where(NotificationPreference.enabled == enabled)
        return await self.get_paginated(db, query, params)

    async def get_for_user(
        self,
        db: AsyncSession,
        organization_id: UUID,
        user_id: UUID,
        preference_id: UUID,
    ) -> NotificationPreference | None:
        """본인 설정 단건 — One preference owned by the user."""
        query: Select = self.for_user(organization_id, user_id).where(NotificationPreference.id == preference_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def existing_types(self, db: AsyncSession, user_id: UUID) -> set[str]:
        """이미 저장된 알림 유형 — Notification types the user already has a row for."""
        query = select(NotificationPreference.notification_type).where(NotificationPreference.user_id == user_id)
        result = await db.execute(query)
        return set(result.scalars().all())

    async def disabled_user_ids(
        self,
        db: AsyncSession,
        user_ids: Iterable[UUID],
        notification_type: str,
    ) -> set[UUID]:
        """해당 유형을 끈 사용자 ID — Users among user_ids who disabled the type.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_ids: 후보 수신자 (Candidate recipients)
            notification_type: 알림 유형 (Notification type)

        Returns:
            set[UUID]: 수신 거부한 사용자 ID 집합 (Recipients to skip)
        """
        ids: list[UUID] = list(user_ids)
        if not ids:
            return set()
        query = select(NotificationPreference.user_id).where(
            NotificationPreference.user_id.in_(ids),
            NotificationPreference.notification_type == notification_type,
            NotificationPreference.enabled.is_(False),
        )
        result = await db.execute(query)
        return set(result.scalars().all())


# 싱글턴 인스턴스: Singleton instance
notification_preference_repository: NotificationPreferenceRepository = NotificationPreferenceRepository()
