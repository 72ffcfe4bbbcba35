"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite (aiosqlite + StaticPool) database,
session factory and httpx client fixtures. Every test gets a fresh schema.
Each request runs in its own session, the same way get_db works in production.
"""

import os

# 앱 임포트 전에 테스트 설정 적용 (Test settings must be in place before taskhub is imported)
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["AXIOM_API_TOKEN"] = ""
os.environ["AXIOM_DATASET"] = ""

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from taskhub.database import Base, get_db  # noqa: E402
from taskhub.main import app  # noqa: E402
from taskhub.models import Organization, TaskPriority, TaskStatus, User, UserRole  # noqa: E402
from taskhub.seed import seed_organization_catalog  # noqa: E402
from taskhub.utils.jwt import create_access_token  # noqa: E402
from taskhub.utils.password import hash_password  # noqa: E402

API = "/api/v1/task-management"
AUTH = "/api/v1/auth"

PASSWORD = "password123"
# bcrypt는 느리므로 세션당 한 번만 해시 (Hash once; bcrypt is slow)
PASSWORD_HASH = hash_password(PASSWORD)


# ---------------------------------------------------------------------------
# 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트별 인메모리 DB 엔진 — 스키마를 새로 생성합니다."""
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """픽스처 데이터 생성용 세션 — Session used to build fixture data."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — get_db를 테스트 DB로 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테넌트 및 역할별 사용자
# ---------------------------------------------------------------------------
async def make_org(db: AsyncSession, name: str, code: str) -> Organization:
    org = Organization(name=name, code=code)
    db.add(org)
    await db.flush()
    await seed_organization_catalog(db, org.id)
    await db.commit()
    return org


async def make_user(db: AsyncSession, org: Organization, role: UserRole, email: str, name: str) -> User:
    user = User(
        organization_id=org.id,
        email=email,
        name=name,
        role=role.value,
        password_hash=PASSWORD_HASH,
    )
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def org(db: AsyncSession) -> Organization:
    """테스트 조직 (기본 상태/우선순위 포함)."""
    return await make_org(db, "Test Corp", "TEST01")


@pytest_asyncio.fixture
async def other_org(db: AsyncSession) -> Organization:
    """다른 테넌트 — Second tenant for isolation checks."""
    return await make_org(db, "Other Corp", "OTHR01")


@pytest_asyncio.fixture
async def pmo_user(db: AsyncSession, org) -> User:
    return await make_user(db, org, UserRole.PMO, "pmo@test.com", "Pat Pmo")


@pytest_asyncio.fixture
async def pm_user(db: AsyncSession, org) -> User:
    return await make_user(db, org, UserRole.PM, "pm@test.com", "Paula Pm")


@pytest_asyncio.fixture
async def dev_user(db: AsyncSession, org) -> User:
    return await make_user(db, org, UserRole.DEVELOPER, "dev@test.com", "Dana Dev")


@pytest_asyncio.fixture
async def qa_user(db: AsyncSession, org) -> User:
    return await make_user(db, org, UserRole.QA, "qa@test.com", "Quinn Qa")


@pytest_asyncio.fixture
async def other_user(db: AsyncSession, other_org) -> User:
    return await make_user(db, other_org, UserRole.PMO, "boss@other.com", "Olly Other")


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({
        "sub": str(user.id),
        "org": str(user.organization_id),
        "role": user.role,
    })


@pytest.fixture
def pmo_token(pmo_user) -> str:
    return make_token(pmo_user)


@pytest.fixture
def pm_token(pm_user) -> str:
    return make_token(pm_user)


@pytest.fixture
def dev_token(dev_user) -> str:
    return make_token(dev_user)


@pytest.fixture
def qa_token(qa_user) -> str:
    return make_token(qa_user)


@pytest.fixture
def other_token(other_user) -> str:
    return make_token(other_user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def statuses(db: AsyncSession, org) -> dict[str, str]:
    """조직의 기본 상태 — code → id."""
    rows = (await db.execute(select(TaskStatus).where(TaskStatus.organization_id == org.id))).scalars().all()
    await db.commit()
    return {row.code: str(row.id) for row in rows}


@pytest_asyncio.fixture
async def priorities(db: AsyncSession, org) -> dict[str, str]:
    """조직의 기본 우선순위 — code → id."""
    rows = (await db.execute(select(TaskPriority).where(TaskPriority.organization_id == org.id))).scalars().all()
    await db.commit()
    return {row.code: str(row.id) for row in rows}
