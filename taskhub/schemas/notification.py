"""알림 및 알림 수신 설정 Pydantic 스키마."""

from pydantic import BaseModel

from taskhub.schemas.common import UTCDateTime


class NotificationResponse(BaseModel):
    """알림 응답 스키마.

    Attributes:
        type: 알림 유형 (task_assigned | task_commented | task_status_changed)
        reference_type: 참조 엔티티 유형 (Entity type for deep-linking)
        reference_id: 참조 엔티티 UUID (Entity UUID for deep-linking)
    """

    id: str
    type: str
    message: str
    reference_type: str | None
    reference_id: str | None
    is_read: bool
    read_at: UTCDateTime | None
    created_at: UTCDateTime


class NotificationUpdate(BaseModel):
    """알림 읽음 상태 변경 요청 스키마 — Mark read (true) or unread (false)."""

    is_read: bool


class ReadAllResponse(BaseModel):
    """전체 읽음 처리 결과 — Number of notifications marked read."""

    updated: int


class NotificationPreferenceResponse(BaseModel):
    """알림 수신 설정 응답 스키마.

    Attributes:
        notification_type: 알림 유형 (task_assigned | task_commented | task_status_changed)
        enabled: 수신 여부 (Whether this type is delivered)
    """

    id: str
    notification_type: str
    enabled: bool
    created_at: UTCDateTime
    updated_at: UTCDateTime


class NotificationPreferenceUpdate(BaseModel):
    """알림 수신 설정 변경 요청 스키마 — Turn a notification type on or off."""

    enabled: bool
