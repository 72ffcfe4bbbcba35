"""초기 데이터 시드 — 기본 작업 상태/우선순위 및 데모 테넌트.

Seed module — Default task statuses/priorities for every new tenant, and a
script that bootstraps a demo tenant with a pmo account.

Usage:
    python -m taskhub.seed

Creates:
    - 1개 조직: "TaskHub Demo" (1 organization)
    - 기본 상태 4개, 우선순위 4개 (4 statuses, 4 priorities)
    - 1개 관리자 계정: admin@taskhub.local / admin1234 (1 pmo user)
"""

import asyncio
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.database import Base, async_session, engine
from taskhub.models import Organization, TaskPriority, TaskStatus, User, UserRole
from taskhub.utils.password import hash_password

# 기본 작업 상태: (code, name) in workflow order
DEFAULT_TASK_STATUSES: list[tuple[str, str]] = [
    ("todo", "To Do"),
    ("in_progress", "In Progress"),
    ("in_review", "In Review"),
    ("done", "Done"),
]

# 기본 우선순위: (code, name) from lowest to highest
DEFAULT_TASK_PRIORITIES: list[tuple[str, str]] = [
    ("low", "Low"),
    ("medium", "Medium"),
    ("high", "High"),
    ("urgent", "Urgent"),
]


async def seed_organization_catalog(db: AsyncSession, organization_id: UUID) -> None:
    """조직에 기본 상태/우선순위를 추가합니다.

    Insert the default task statuses and priorities for a new organization.
    Called by tenant setup; does not commit.
    """
    for code, name in DEFAULT_TASK_STATUSES:
        db.add(TaskStatus(organization_id=organization_id, code=code, name=name))
    for code, name in DEFAULT_TASK_PRIORITIES:
        db.add(TaskPriority(organization_id=organization_id, code=code, name=name))
    await db.flush()


async def seed() -> None:
    """데모 테넌트를 생성합니다.

    Create tables if needed and bootstrap a demo tenant.

    Idempotent: 이미 시드된 경우 건너뜁니다 (Skips if already seeded).
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        result = await db.execute(select(Organization).limit(1))
        if result.scalar_one_or_none():
            print("Already seeded. Skipping.")
            return

        org: Organization = Organization(name="TaskHub Demo")
        db.add(org)
        await db.flush()

        await seed_organization_catalog(db, org.id)

        db.add(User(
            organization_id=org.id,
            email="admin@taskhub.local",
            name="Admin",
            role=UserRole.PMO.value,
            password_hash=hash_password("admin1234"),
        ))
        await db.commit()
        print(f"Seeded organization {org.name} (company code: {org.code})")
        print("  pmo login: admin@taskhub.local / admin1234")


if __name__ == "__main__":
    asyncio.run(seed())
