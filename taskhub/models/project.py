"""프로젝트 및 보드 관련 SQLAlchemy ORM 모델 정의.

Project and board SQLAlchemy ORM model definitions.
A project owns boards; both keep an explicit member list.

Tables:
    - projects: 프로젝트 (Top-level work container, code unique per org)
    - project_members: 프로젝트 멤버 (Project membership)
    - boards: 보드 (Board inside a project, code unique per project)
    - board_members: 보드 멤버 (Board membership)
"""

import uuid

from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskhub.database import Base, SoftDeleteMixin


class Project(SoftDeleteMixin, Base):
    """프로젝트 모델.

    Project model — Groups boards and tasks under an owner.

    Attributes:
        owner_id: 프로젝트 소유자 (Owner user; may update/delete the project)
        code: 프로젝트 코드 (Short code, unique per organization)
        name: 프로젝트 이름 (Display name)
        description: 설명 (Optional description)
    """

    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    code: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    boards = relationship("Board", back_populates="project")


class ProjectMember(SoftDeleteMixin, Base):
    """프로젝트 멤버 모델 — A user participating in a project."""

    __tablename__ = "project_members"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    user = relationship("User", lazy="raise")


class Board(SoftDeleteMixin, Base):
    """보드 모델.

    Board model — A work board inside a project.

    Attributes:
        project_id: 소속 프로젝트 FK (Parent project)
        owner_id: 보드 소유자 (Owner user)
        code: 보드 코드 (Short code, unique per project)
    """

    __tablename__ = "boards"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    project_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    code: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    project = relationship("Project", back_populates="boards")


class BoardMember(SoftDeleteMixin, Base):
    """보드 멤버 모델 — A user participating in a board."""

    __tablename__ = "board_members"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    board_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    user = relationship("User", lazy="raise")
