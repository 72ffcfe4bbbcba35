"""업무 분류 카탈로그 모델 — 작업 상태 및 우선순위.

Task catalog models — Task statuses and task priorities.
Both are tenant-scoped lookup tables referenced by tasks through nullable FKs.
Codes are unique per organization among non-deleted rows (enforced in services).

Tables:
    - task_statuses: 작업 상태 (e.g. todo, in_progress, done)
    - task_priorities: 작업 우선순위 (e.g. low, medium, high)
"""

import uuid

from sqlalchemy import ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from taskhub.database import Base, SoftDeleteMixin


class TaskStatus(SoftDeleteMixin, Base):
    """작업 상태 모델 — Workflow state a task can be in."""

    __tablename__ = "task_statuses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class TaskPriority(SoftDeleteMixin, Base):
    """작업 우선순위 모델 — Urgency level a task can carry."""

    __tablename__ = "task_priorities"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    organization_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    code: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
