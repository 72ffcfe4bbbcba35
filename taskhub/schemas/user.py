"""사용자 관리 Pydantic 스키마.

User management request schemas. Responses reuse
taskhub.schemas.auth.UserResponse.
"""

from pydantic import BaseModel, Field

from taskhub.models.user import UserRole
from taskhub.schemas.auth import EmailAddress, PASSWORD_MIN_LENGTH


class UserCreate(BaseModel):
    """사용자 생성 요청 스키마 — 관리자가 초기 비밀번호와 함께 생성.

    Attributes:
        email: 로그인 이메일 (Unique across the system)
        password: 초기 비밀번호 (Initial password)
        name: 표시 이름 (Display name)
        role: 역할 (Any UserRole value)
    """

    email: EmailAddress
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)
    name: str = Field(min_length=1, max_length=255)
    role: UserRole


class UserUpdate(BaseModel):
    """사용자 수정 요청 스키마 (부분 업데이트).

    role 변경은 pmo만 가능 (Only pmo may change roles).
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    password: str | None = Field(default=None, min_length=PASSWORD_MIN_LENGTH)
    role: UserRole | None = None
