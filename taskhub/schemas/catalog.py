"""작업 상태/우선순위 카탈로그 Pydantic 스키마.

Schemas for the task status and task priority catalogs. Both catalogs share
the same shape, so one set of schemas serves both.
"""

from pydantic import BaseModel, Field

from taskhub.schemas.common import UTCDateTime


class CatalogCreate(BaseModel):
    """카탈로그 항목 생성 요청 스키마.

    Attributes:
        code: 코드 (Machine code, unique per organization)
        name: 이름 (Display name)
        description: 설명 (Optional description)
    """

    code: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None


class CatalogUpdate(BaseModel):
    """카탈로그 항목 수정 요청 스키마 (부분 업데이트)."""

    code: str | None = Field(default=None, min_length=1, max_length=100)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None


class CatalogResponse(BaseModel):
    """카탈로그 항목 응답 스키마 — Task status / priority DTO."""

    id: str
    organization_id: str
    code: str
    name: str
    description: str | None
    created_at: UTCDateTime
    updated_at: UTCDateTime
