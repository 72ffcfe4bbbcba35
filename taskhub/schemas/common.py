"""공통 Pydantic 스키마 및 타입 정의.

Common Pydantic schemas and annotated types shared across API domains.
"""

from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel


def ensure_utc(value: datetime) -> datetime:
    """UTC 오프셋 보장 — Attach/convert to UTC so timestamps always carry an offset.

    SQLite는 타임존 정보를 저장하지 않으므로 naive 값은 UTC로 간주합니다
    (Naive values come back from SQLite and are stored as UTC).
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# 응답용 일시 타입: ISO-8601 with UTC offset
UTCDateTime = Annotated[datetime, AfterValidator(ensure_utc)]


class MessageResponse(BaseModel):
    """단순 메시지 응답 스키마 — Generic message response.

    Attributes:
        message: 응답 메시지 (Human-readable message)
    """

    message: str
