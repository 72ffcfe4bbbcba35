"""작업(Task) 관련 SQLAlchemy ORM 모델 정의.

Task-related SQLAlchemy ORM model definitions.

Tables:
    - tasks: 작업 (Work item with optional status/priority/project/board)
    - task_assignments: 작업 담당자 배정 (Assignee links)
    - task_comments: 작업 코멘트 (Comments on a task)
    - task_status_changes: 상태 변경 이력 (Status transition history)
"""

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskhub.database import Base, SoftDeleteMixin, utcnow


class Task(SoftDeleteMixin, Base):
    """작업 모델.

    Task model — The central work item.

    Attributes:
        status_id: 현재 상태 FK (Current status, nullable)
        priority_id: 우선순위 FK (Priority, nullable)
        creator_id: 작성자 FK (User who created the task)
        project_id: 소속 프로젝트 FK (Optional project)
        board_id: 소속 보드 FK (Optional board; must belong to project_id when both set)
        title: 제목 (Title)
        description: 설명 (Optional body)
        due_date: 마감일 (Optional due date)
    """

    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    status_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("task_statuses.id"), nullable=True)
    priority_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("task_priorities.id"), nullable=True)
    creator_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    project_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("projects.id"), nullable=True, index=True)
    board_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("boards.id"), nullable=True, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    status = relationship("TaskStatus", lazy="raise")
    priority = relationship("TaskPriority", lazy="raise")
    assignments = relationship(
        "TaskAssignment",
        primaryjoin="and_(Task.id == TaskAssignment.task_id, TaskAssignment.deleted_at.is_(None))",
        viewonly=True,
        lazy="raise",
    )


class TaskAssignment(SoftDeleteMixin, Base):
    """작업 배정 모델 — Links a task to an assignee."""

    __tablename__ = "task_assignments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    task_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    assignee_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    assignee = relationship("User", lazy="raise")


class TaskComment(SoftDeleteMixin, Base):
    """작업 코멘트 모델 — Free-text comment authored by a user."""

    __tablename__ = "task_comments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    task_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    commenter_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    comment_body: Mapped[str] = mapped_column(Text, nullable=False)


class TaskStatusChange(SoftDeleteMixin, Base):
    """상태 변경 이력 모델.

    Task status change model — One row per status transition.
    Creating a row also moves tasks.status_id to new_status_id.
    """

    __tablename__ = "task_status_changes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    task_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    new_status_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("task_statuses.id"), nullable=False)
    changed_by_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    changed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    new_status = relationship("TaskStatus", lazy="raise")
