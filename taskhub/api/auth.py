"""인증 라우터 — 테넌트 설정, 역할별 가입/로그인, 토큰 갱신, 로그아웃.

Auth Router — Tenant setup, role-scoped join/login, token refresh,
logout and current-user lookup.

Endpoints:
    POST /auth/setup           — 테넌트 생성 + 첫 pmo 계정 (Bootstrap a tenant)
    POST /auth/{role}/join     — 역할별 회원가입 (Role-scoped registration)
    POST /auth/{role}/login    — 역할별 로그인 (Role-scoped login)
    POST /auth/refresh         — 리프레시 토큰 회전 (Rotate refresh token)
    POST /auth/logout          — 리프레시 토큰 폐기 (Revoke refresh token)
    GET  /auth/me              — 현재 사용자 (Current user)
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.api.deps import get_current_user
from taskhub.database import get_db
from taskhub.models.user import User, UserRole
from taskhub.schemas.auth import (
    AuthorizedResponse,
    JoinRequest,
    LoginRequest,
    MeResponse,
    RefreshRequest,
    SetupRequest,
)
from taskhub.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/setup", response_model=AuthorizedResponse, status_code=201)
async def setup(
    data: SetupRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthorizedResponse:
    """새 조직과 첫 pmo 계정을 생성합니다.

    Create an organization, seed its task catalog and register its first pmo.
    """
    result: AuthorizedResponse = await auth_service.setup(db, data)
    await db.commit()
    return result


@router.post("/{role}/join", response_model=AuthorizedResponse, status_code=201)
async def join(
    role: UserRole,
    data: JoinRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthorizedResponse:
    """회사 코드로 조직에 가입합니다 — Register into an organization by company code."""
    result: AuthorizedResponse = await auth_service.join(db, role, data)
    await db.commit()
    return result


@router.post("/{role}/login", response_model=AuthorizedResponse)
async def login(
    role: UserRole,
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthorizedResponse:
    """역할별 로그인 — Log in as the role given in the path."""
    result: AuthorizedResponse = await auth_service.login(db, role, data)
    await db.commit()
    return result


@router.post("/refresh", response_model=AuthorizedResponse)
async def refresh(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthorizedResponse:
    """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

    Exchange a refresh token for a new access/refresh pair (rotation).
    """
    result: AuthorizedResponse = await auth_service.refresh(db, data.refresh_token)
    await db.commit()
    return result


@router.post("/logout", status_code=204)
async def logout(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """리프레시 토큰을 폐기합니다 — Revoke a refresh token (idempotent)."""
    await auth_service.logout(db, data.refresh_token)
    await db.commit()


@router.get("/me", response_model=MeResponse)
async def get_me(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> MeResponse:
    """현재 사용자 정보를 조회합니다."""
    return await auth_service.get_me(db, current_user)
