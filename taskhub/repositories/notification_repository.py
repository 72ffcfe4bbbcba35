"""알림 레포지토리 — 사용자별 알림 조회 및 읽음 처리.

Notification Repository — Per-user notification queries and read-state updates.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, update
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.database import utcnow
from taskhub.models.notification import Notification
from taskhub.repositories.base import BaseRepository
from taskhub.utils.pagination import PageParams


class NotificationRepository(BaseRepository[Notification]):
    """알림 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Notification, sortable=("created_at", "read_at"))

    def for_user(self, organization_id: UUID, user_id: UUID) -> Select:
        """수신자 범위 기본 쿼리 — Live notifications of one recipient."""
        return self.base_query(organization_id).where(Notification.user_id == user_id)

    async def search(
        self,
        db: AsyncSession,
        organization_id: UUID,
        user_id: UUID,
        params: PageParams,
        is_read: bool | None = None,
    ) -> tuple[Sequence[Notification], int]:
        """사용자 알림 목록 (읽음 여부 필터) — Recipient's notifications, optionally by read flag."""
        query: Select = self.for_user(organization_id, user_id)
        if is_read is not None:
            query = query.where(Notification.is_read == is_read)
        return await self.get_paginated(db, query, params)

    async def get_for_user(
        self,
        db: AsyncSession,
        organization_id: UUID,
        user_id: UUID,
        notification_id: UUID,
    ) -> Notification | None:
        """수신자 본인의 알림 단건 — One notification owned by the recipient."""
        query: Select = self.for_user(organization_id, user_id).where(Notification.id == notification_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def mark_all_read(
        self,
        db: AsyncSession,
        organization_id: UUID,
        user_id: UUID,
    ) -> int:
        """안 읽은 알림 모두 읽음 처리.

        Mark every unread notification of the recipient as read.

        Returns:
            int: 변경된 알림 수 (Number of notifications updated)
        """
        now = utcnow()
        stmt = (
            update(Notification)
            .where(
                Notification.organization_id == organization_id,
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
                Notification.deleted_at.is_(None),
            )
            .values(is_read=True, read_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        await db.flush()
        return result.rowcount or 0


# 싱글턴 인스턴스: Singleton instance
notification_repository: NotificationRepository = NotificationRepository()
