"""조직(테넌트) SQLAlchemy ORM 모델 정의.

Organization (tenant) SQLAlchemy ORM model definition.
Every other table in the system is scoped by organization_id.

Tables:
    - organizations: 최상위 테넌트 (Top-level tenant)
"""

import random
import string
import uuid

from sqlalchemy import Boolean, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskhub.database import Base, TimestampMixin


def generate_company_code() -> str:
    """6자리 랜덤 회사 코드 생성 (대문자 + 숫자).

    Generate a random 6-character company code (uppercase letters + digits).
    """
    chars = string.ascii_uppercase + string.digits
    return "".join(random.choices(chars, k=6))


class Organization(TimestampMixin, Base):
    """조직(테넌트) 모델 — 시스템의 최상위 엔티티.

    Organization (tenant) model — Top-level entity in the system.
    Users join an organization through its company code.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 조직 이름 (Organization name)
        code: 회사 코드 (Company code used by /auth/{role}/join)
        is_active: 활성 상태 (Inactive tenants cannot log in)
    """

    __tablename__ = "organizations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 회사 코드: Short unique company code (6 chars, uppercase + digits)
    code: Mapped[str] = mapped_column(String(6), unique=True, nullable=False, default=generate_company_code)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    users = relationship("User", back_populates="organization")
