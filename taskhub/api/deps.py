"""FastAPI 의존성 주입 모듈 — 인증 및 역할 기반 권한 검사.

FastAPI dependency injection module — Authentication and authorization.
Provides reusable dependencies for extracting the current user from the
access token and enforcing role groups on API endpoints.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. HTTPBearer가 토큰을 추출, 없으면 401 (HTTPBearer extracts the token; missing → 401)
    3. decode_token()이 JWT를 검증하고 "access" 타입인지 확인
       (decode_token verifies the JWT; only access tokens are accepted)
    4. 페이로드의 "sub"/"org"로 살아있는 사용자와 활성 조직을 조회
       (A live user matching "sub" and "org" is loaded; the tenant must be active)

Authorization (require_roles):
    관리자 = tpm, pm, pmo / pmo = 테넌트 관리자
    (managers = tpm, pm, pmo; pmo is the tenant administrator)
"""

from typing import Annotated, Awaitable, Callable
from uuid import UUID

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.database import get_db
from taskhub.models.organization import Organization
from taskhub.models.user import MANAGER_ROLES, User, UserRole
from taskhub.repositories.organization_repository import organization_repository
from taskhub.repositories.user_repository import user_repository
from taskhub.utils.exceptions import ForbiddenError, UnauthorizedError
from taskhub.utils.jwt import decode_token

# HTTP Bearer 토큰 추출기: 헤더가 없어도 직접 401을 반환하도록 auto_error=False
# (Extracts the bearer token; missing credentials are turned into 401 below)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """액세스 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode the access token from the Authorization header and return the
    authenticated user.

    Args:
        request: 요청 객체 — 로깅 미들웨어용 역할 기록 (Request; role is recorded for logging)
        credentials: HTTP Bearer 토큰 자격 증명 (Bearer token credentials from header)
        db: 비동기 DB 세션 (Async database session)

    Returns:
        User: 인증된 사용자 ORM 인스턴스 (Authenticated user ORM instance)

    Raises:
        UnauthorizedError: 토큰 누락/무효/만료, 사용자 없음 또는 삭제됨
                           (Missing, invalid or expired token; user deleted or tenant inactive)
    """
    if credentials is None:
        raise UnauthorizedError("Authentication required")
    try:
        payload: dict = decode_token(credentials.credentials)
        # 토큰 타입 검증: Reject refresh tokens used as access tokens
        if payload.get("type") != "access":
            raise UnauthorizedError("Invalid token type")
        user_id = UUID(payload["sub"])
        org_id = UUID(payload["org"])
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise UnauthorizedError("Invalid or expired token")

    user: User | None = await user_repository.get_by_id(db, user_id, org_id)
    if user is None:
        raise UnauthorizedError("User not found or inactive")
    org: Organization | None = await organization_repository.get_by_id(db, org_id)
    if org is None or not org.is_active:
        raise UnauthorizedError("User not found or inactive")

    request.state.user_role = user.role
    return user


def require_roles(*roles: str) -> Callable[..., Awaitable[User]]:
    """역할 그룹 기반 권한 검사 의존성 팩토리.

    Dependency factory that only lets the given roles through.

    Args:
        roles: 허용 역할 이름 (Allowed role names)

    Returns:
        FastAPI 의존성 함수 — 인증된 사용자 반환 또는 403 발생
        (FastAPI dependency function that returns User or raises 403)
    """
    allowed: frozenset[str] = frozenset(roles)

    async def _check(
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        if current_user.role not in allowed:
            raise ForbiddenError("Insufficient permissions")
        return current_user
    return _check


# 편의 의존성: Pre-configured role group dependencies
require_manager = require_roles(*MANAGER_ROLES)   # tpm + pm + pmo
require_pmo = require_roles(UserRole.PMO.value)   # pmo only
