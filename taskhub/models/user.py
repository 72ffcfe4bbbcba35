"""사용자 SQLAlchemy ORM 모델 및 역할 정의.

User SQLAlchemy ORM model and role definitions.
Each user belongs to one organization and holds exactly one role.

Roles:
    - tpm: 기술 프로젝트 매니저 (Technical project manager)
    - pm: 프로젝트 매니저 (Project manager)
    - pmo: 프로젝트 관리 조직 — 테넌트 관리자 (Project management office, tenant admin)
    - developer / designer / qa: 실무자 (Individual contributors)
"""

import enum
import uuid

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskhub.database import Base, SoftDeleteMixin


class UserRole(str, enum.Enum):
    """사용자 역할 — Role names as stored in users.role and carried in JWTs."""

    TPM = "tpm"
    PM = "pm"
    PMO = "pmo"
    DEVELOPER = "developer"
    DESIGNER = "designer"
    QA = "qa"


# 관리자 역할 그룹: Roles allowed to manage catalogs, projects, boards and assignments
MANAGER_ROLES: frozenset[str] = frozenset({UserRole.TPM.value, UserRole.PM.value, UserRole.PMO.value})


class User(SoftDeleteMixin, Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Email is unique across the whole system and is the login identifier.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        organization_id: 소속 조직 FK (Parent organization foreign key)
        email: 로그인 이메일 (Login email, stored lower-cased)
        name: 표시 이름 (Display name)
        role: 역할 이름 (One of UserRole values)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        deleted_at: 소프트 삭제 일시 (Soft delete timestamp; deleted users cannot log in)
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    # 비밀번호 해시: bcrypt hash (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    organization = relationship("Organization", back_populates="users")
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_manager(self) -> bool:
        return self.role in MANAGER_ROLES
