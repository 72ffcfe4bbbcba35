"""프로젝트/보드/멤버 Pydantic 요청/응답 스키마 정의.

Project, board and membership request/response schema definitions.
"""

from uuid import UUID

from pydantic import BaseModel, Field

from taskhub.schemas.common import UTCDateTime


# === 프로젝트 (Project) 스키마 ===

class ProjectCreate(BaseModel):
    """프로젝트 생성 요청 스키마.

    Attributes:
        code: 프로젝트 코드 (Unique per organization)
        name: 프로젝트 이름 (Display name)
        description: 설명 (Optional description)
        owner_id: 소유자 UUID — 생략 시 요청자 (Owner; defaults to the caller)
    """

    code: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    owner_id: UUID | None = None


class ProjectUpdate(BaseModel):
    """프로젝트 수정 요청 스키마 (부분 업데이트)."""

    code: str | None = Field(default=None, min_length=1, max_length=100)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    owner_id: UUID | None = None


class ProjectResponse(BaseModel):
    """프로젝트 응답 스키마 — Project DTO."""

    id: str
    organization_id: str
    owner_id: str
    code: str
    name: str
    description: str | None
    created_at: UTCDateTime
    updated_at: UTCDateTime


# === 보드 (Board) 스키마 ===

class BoardCreate(BaseModel):
    """보드 생성 요청 스키마. project_id는 URL 경로에서 전달.

    Board creation request. project_id comes from the URL path.
    owner_id defaults to the caller.
    """

    code: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    owner_id: UUID | None = None


class BoardUpdate(BaseModel):
    """보드 수정 요청 스키마 (부분 업데이트)."""

    code: str | None = Field(default=None, min_length=1, max_length=100)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    owner_id: UUID | None = None


class BoardResponse(BaseModel):
    """보드 응답 스키마 — Board DTO."""

    id: str
    organization_id: str
    project_id: str
    owner_id: str
    code: str
    name: str
    description: str | None
    created_at: UTCDateTime
    updated_at: UTCDateTime


# === 멤버 (Membership) 스키마 ===

class MemberCreate(BaseModel):
    """멤버 추가 요청 스키마 — Add a tenant user to a project or board."""

    user_id: UUID


class MemberResponse(BaseModel):
    """멤버 응답 스키마 — Project/board member DTO.

    Attributes:
        parent_id: 프로젝트 또는 보드 UUID (Project or board the membership belongs to)
        user_name: 사용자 이름 (Member display name)
    """

    id: str
    parent_id: str
    user_id: str
    user_name: str
    user_role: str
    created_at: UTCDateTime
