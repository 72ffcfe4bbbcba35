"""알림 모델 — 사용자별 인앱 알림 및 알림 수신 설정.

Notification models — Per-user in-app notifications and the per-type
preferences that decide whether a user receives them.
Notifications are created when a task is assigned to a user, or a task the
user created or is assigned to receives a comment or a status change.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from taskhub.database import Base, SoftDeleteMixin, TimestampMixin


class NotificationType(str, enum.Enum):
    """알림 유형 — Values stored in notifications.type and notification_preferences.notification_type."""

    TASK_ASSIGNED = "task_assigned"
    TASK_COMMENTED = "task_commented"
    TASK_STATUS_CHANGED = "task_status_changed"


class Notification(SoftDeleteMixin, Base):
    """알림 테이블.

    Attributes:
        user_id: 수신자 (Recipient user)
        type: 알림 유형 — NotificationType 값 (NotificationType value)
        message: 표시 메시지 (Display message)
        reference_type: 참조 엔티티 유형 — 딥링크용 (Entity type for deep-linking)
        reference_id: 참조 엔티티 UUID — 딥링크용 (Entity UUID for deep-linking)
        is_read: 읽음 여부 (Read flag)
        read_at: 읽은 일시 (When the notification was read)
    """

    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    reference_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reference_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class NotificationPreference(TimestampMixin, Base):
    """알림 수신 설정 테이블 — 사용자 × 알림 유형당 한 행.

    One row per user and notification type. A user without a row for a type
    receives that type; enabled=False suppresses it.

    Attributes:
        user_id: 설정 소유자 (Owner user)
        notification_type: 알림 유형 (NotificationType value)
        enabled: 수신 여부 (Whether notifications of this type are created)
    """

    __tablename__ = "notification_preferences"
    __table_args__ = (
        UniqueConstraint("user_id", "notification_type", name="uq_notification_preferences_user_type"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    notification_type: Mapped[str] = mapped_column(String(50), nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
