"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers tenant setup, role-based join/login, token refresh and the
"Authorized" response (user + token bundle).
"""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field, field_validator

from taskhub.schemas.common import UTCDateTime

# 비밀번호 최소 길이: Minimum password length accepted on join/setup/user create
PASSWORD_MIN_LENGTH: int = 8


def normalize_email(value: str) -> str:
    """이메일 정규화 — Strip and lower-case; reject values without a single '@'."""
    value = value.strip().lower()
    local, sep, domain = value.partition("@")
    if not sep or not local or not domain or "@" in domain:
        raise ValueError("Invalid email address")
    return value


# 정규화된 이메일 타입: Lower-cased email accepted by join/setup/user create
EmailAddress = Annotated[str, AfterValidator(normalize_email)]


class SetupRequest(BaseModel):
    """테넌트 초기 설정 요청 스키마.

    Tenant bootstrap request. Creates an organization and its first pmo user.

    Attributes:
        organization_name: 조직 이름 (Organization display name)
        email: 관리자 이메일 (Admin login email)
        password: 비밀번호 (Plain text, bcrypt-hashed on server)
        name: 관리자 이름 (Admin display name)
    """

    organization_name: str = Field(min_length=1, max_length=255)
    email: EmailAddress
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    name: str = Field(min_length=1, max_length=255)


class JoinRequest(BaseModel):
    """역할별 회원가입 요청 스키마 (POST /auth/{role}/join).

    Role-scoped join request. The role comes from the URL path.

    Attributes:
        email: 로그인 이메일 (Login email, unique across the system)
        password: 비밀번호 (8자 이상, at least 8 characters)
        name: 표시 이름 (Display name)
        company_code: 회사 코드 (Company code of the organization to join)
    """

    email: EmailAddress
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    name: str = Field(min_length=1, max_length=255)
    company_code: str = Field(min_length=1, max_length=6)


class LoginRequest(BaseModel):
    """역할별 로그인 요청 스키마 (POST /auth/{role}/login)."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _lower(cls, value: str) -> str:
        return value.strip().lower()


class RefreshRequest(BaseModel):
    """토큰 갱신/로그아웃 요청 스키마.

    Token refresh (and logout) request schema.

    Attributes:
        refresh_token: 기존 리프레시 토큰 (Existing refresh token)
    """

    refresh_token: str


class TokenInfo(BaseModel):
    """토큰 정보 — Token bundle returned inside Authorized.

    Attributes:
        access: JWT 액세스 토큰 (Short-lived access token)
        refresh: JWT 리프레시 토큰 (Long-lived refresh token)
        expired_at: 액세스 토큰 만료 시각 (Access token expiry)
        refreshable_until: 리프레시 토큰 만료 시각 (Refresh token expiry)
    """

    access: str
    refresh: str
    expired_at: UTCDateTime
    refreshable_until: UTCDateTime


class UserResponse(BaseModel):
    """사용자 응답 스키마 — User DTO (never exposes the password hash)."""

    id: str
    organization_id: str
    email: str
    name: str
    role: str
    created_at: UTCDateTime
    updated_at: UTCDateTime


class AuthorizedResponse(UserResponse):
    """인증 응답 스키마 — User DTO plus the issued token bundle."""

    token: TokenInfo


class MeResponse(UserResponse):
    """현재 사용자 응답 스키마 (GET /auth/me) — adds tenant details."""

    organization_name: str
    company_code: str
