"""조직(테넌트) Pydantic 스키마."""

from pydantic import BaseModel, Field

from taskhub.schemas.common import UTCDateTime


class OrganizationResponse(BaseModel):
    """조직 응답 스키마 — Organization DTO.

    Attributes:
        code: 회사 코드 (Company code shared with joining users)
        is_active: 활성 상태 (Inactive tenants cannot log in)
    """

    id: str
    name: str
    code: str
    is_active: bool
    created_at: UTCDateTime
    updated_at: UTCDateTime


class OrganizationUpdate(BaseModel):
    """조직 수정 요청 스키마 (부분 업데이트, pmo only)."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    is_active: bool | None = None
