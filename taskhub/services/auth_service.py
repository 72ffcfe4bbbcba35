"""인증 서비스 — 테넌트 설정, 역할별 가입/로그인, 토큰 갱신 비즈니스 로직.

Auth Service — Business logic for tenant setup, role-scoped join/login,
refresh token rotation and logout. Every join/login/refresh attempt is
written to the auth audit log, failures included.
"""

from datetime import datetime
from uuid import UUID

import jwt
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.database import utcnow
from taskhub.models.organization import Organization, generate_company_code
from taskhub.models.token import RefreshToken
from taskhub.models.user import User, UserRole
from taskhub.repositories.auth_repository import auth_repository
from taskhub.repositories.organization_repository import organization_repository
from taskhub.repositories.user_repository import user_repository
from taskhub.schemas.auth import (
    AuthorizedResponse,
    JoinRequest,
    LoginRequest,
    MeResponse,
    SetupRequest,
    TokenInfo,
)
from taskhub.schemas.common import ensure_utc
from taskhub.seed import seed_organization_catalog
from taskhub.services.user_service import user_service
from taskhub.utils.exceptions import DuplicateError, NotFoundError, UnauthorizedError
from taskhub.utils.jwt import (
    access_token_expiry,
    create_access_token,
    create_refresh_token,
    decode_token,
    refresh_token_expiry,
)
from taskhub.utils.password import hash_password, verify_password

# 로그인 실패 공통 메시지: 실패 원인을 노출하지 않음 (Same message for every login failure)
INVALID_CREDENTIALS: str = "Invalid credentials"


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    """

    def _build_jwt_payload(self, user: User) -> dict[str, str]:
        """JWT 토큰 페이로드를 생성합니다 — sub / org / role claims."""
        return {
            "sub": str(user.id),
            "org": str(user.organization_id),
            "role": user.role,
        }

    async def _generate_tokens(
        self,
        db: AsyncSession,
        user: User,
    ) -> TokenInfo:
        """액세스 토큰과 리프레시 토큰을 발급하고 리프레시 토큰을 저장합니다.

        Issue an access/refresh token pair and persist the refresh token.
        Existing refresh tokens of the user stay valid (one per device).
        """
        payload: dict[str, str] = self._build_jwt_payload(user)
        expired_at: datetime = access_token_expiry()
        refreshable_until: datetime = refresh_token_expiry()
        access_token: str = create_access_token(payload, expires_at=expired_at)
        refresh_token: str = create_refresh_token(payload, expires_at=refreshable_until)

        await auth_repository.create_refresh_token(
            db, user_id=user.id, token=refresh_token, expires_at=refreshable_until
        )
        return TokenInfo(
            access=access_token,
            refresh=refresh_token,
            expired_at=expired_at,
            refreshable_until=refreshable_until,
        )

    async def _authorized(self, db: AsyncSession, user: User) -> AuthorizedResponse:
        """사용자 DTO + 토큰 번들 — Build the Authorized response."""
        token: TokenInfo = await self._generate_tokens(db, user)
        return AuthorizedResponse(**user_service.to_response(user).model_dump(), token=token)

    async def _record_failure(
        self,
        db: AsyncSession,
        error: HTTPException,
        event: str,
        email: str | None = None,
        role: str | None = None,
        organization_id: UUID | None = None,
        user_id: UUID | None = None,
    ) -> None:
        """실패 감사 로그를 기록하고 커밋합니다. 호출자가 이어서 error를 발생시킵니다.

        Record a failed attempt and commit it; the caller raises error next.
        The commit carries the audit row and, on refresh, the revocation of
        the presented token.
        """
        await auth_repository.add_audit_log(
            db,
            event=event,
            success=False,
            email=email,
            role=role,
            organization_id=organization_id,
            user_id=user_id,
            reason=str(error.detail),
        )
        await db.commit()

    async def _unique_company_code(self, db: AsyncSession) -> str:
        """사용되지 않은 회사 코드 생성 — Generate a company code that is not taken."""
        code: str = generate_company_code()
        while await organization_repository.code_exists(db, code):
            code = generate_company_code()
        return code

    async def setup(
        self,
        db: AsyncSession,
        data: SetupRequest,
    ) -> AuthorizedResponse:
        """새 테넌트를 설정합니다.

        Bootstrap a tenant: organization, default task catalog and the first
        pmo user.

        Raises:
            DuplicateError: 이메일이 이미 사용 중일 때 (Email already registered)
        """
        if await user_repository.email_taken(db, data.email):
            error = DuplicateError("Email already registered")
            await self._record_failure(db, error, "setup", email=data.email, role=UserRole.PMO.value)
            raise error

        org: Organization = await organization_repository.create(
            db, {"name": data.organization_name, "code": await self._unique_company_code(db)}
        )
        await seed_organization_catalog(db, org.id)

        user: User = await user_repository.create(
            db,
            {
                "organization_id": org.id,
                "email": data.email,
                "name": data.name,
                "role": UserRole.PMO.value,
                "password_hash": hash_password(data.password),
            },
        )
        await auth_repository.add_audit_log(
            db, event="setup", success=True, email=user.email, role=user.role,
            organization_id=org.id, user_id=user.id,
        )
        return await self._authorized(db, user)

    async def join(
        self,
        db: AsyncSession,
        role: UserRole,
        data: JoinRequest,
    ) -> AuthorizedResponse:
        """역할별 회원가입을 처리합니다.

        Register a user with the role from the URL path inside the
        organization identified by the company code.

        Raises:
            NotFoundError: 회사 코드가 없거나 비활성일 때 (Unknown or inactive company code)
            DuplicateError: 이메일이 이미 사용 중일 때 (Email already registered)
        """
        org: Organization | None = await organization_repository.get_by_code(db, data.company_code)
        if org is None or not org.is_active:
            error = NotFoundError("Organization not found")
            await self._record_failure(db, error, "join", email=data.email, role=role.value)
            raise error
        if await user_repository.email_taken(db, data.email):
            error = DuplicateError("Email already registered")
            await self._record_failure(db, error, "join", email=data.email, role=role.value, organization_id=org.id)
            raise error

        user: User = await user_repository.create(
            db,
            {
                "organization_id": org.id,
                "email": data.email,
                "name": data.name,
                "role": role.value,
                "password_hash": hash_password(data.password),
            },
        )
        await auth_repository.add_audit_log(
            db, event="join", success=True, email=user.email, role=user.role,
            organization_id=org.id, user_id=user.id,
        )
        return await self._authorized(db, user)

    async def login(
        self,
        db: AsyncSession,
        role: UserRole,
        data: LoginRequest,
    ) -> AuthorizedResponse:
        """역할별 로그인을 처리합니다.

        Authenticate a user against the role from the URL path. Every failure
        reports the same 401 so callers cannot tell which check failed.

        Raises:
            UnauthorizedError: 자격 증명이 유효하지 않을 때 (Invalid credentials)
        """
        user: User | None = await user_repository.get_by_email(db, data.email)
        reason: str | None = None
        org: Organization | None = None
        if user is None:
            reason = "unknown email"
        elif not verify_password(data.password, user.password_hash):
            reason = "wrong password"
        elif user.role != role.value:
            reason = "role mismatch"
        else:
            org = await organization_repository.get_by_id(db, user.organization_id)
            if org is None or not org.is_active:
                reason = "inactive organization"

        if reason is not None:
            await auth_repository.add_audit_log(
                db, event="login", success=False, email=data.email, role=role.value,
                organization_id=user.organization_id if user else None,
                user_id=user.id if user else None, reason=reason,
            )
            await db.commit()
            raise UnauthorizedError(INVALID_CREDENTIALS)

        await auth_repository.add_audit_log(
            db, event="login", success=True, email=user.email, role=user.role,
            organization_id=user.organization_id, user_id=user.id,
        )
        return await self._authorized(db, user)

    async def refresh(
        self,
        db: AsyncSession,
        refresh_token: str,
    ) -> AuthorizedResponse:
        """리프레시 토큰을 회전시킵니다.

        Rotate a refresh token: the presented token is deleted and a new
        pair is issued.

        Raises:
            UnauthorizedError: 토큰이 유효하지 않거나 만료/폐기되었을 때
                               (Invalid, expired, revoked or access-typed token)
        """
        try:
            payload: dict = decode_token(refresh_token)
        except jwt.InvalidTokenError:
            error = UnauthorizedError("Invalid or expired refresh token")
            await self._record_failure(db, error, "refresh")
            raise error
        if payload.get("type") != "refresh":
            error = UnauthorizedError("Invalid token type")
            await self._record_failure(db, error, "refresh")
            raise error

        stored: RefreshToken | None = await auth_repository.get_refresh_token(db, refresh_token)
        if stored is None or ensure_utc(stored.expires_at) <= utcnow():
            error = UnauthorizedError("Refresh token revoked or expired")
            await self._record_failure(db, error, "refresh")
            raise error
        user_id: UUID = stored.user_id

        # 삭제 건수 0 = 동시 요청이 먼저 회전함 (0 rows: a concurrent refresh spent it first)
        if await auth_repository.delete_refresh_token(db, refresh_token) == 0:
            error = UnauthorizedError("Refresh token revoked or expired")
            await self._record_failure(db, error, "refresh", user_id=user_id)
            raise error

        user: User | None = await user_repository.get_by_id(db, user_id)
        org: Organization | None = (
            await organization_repository.get_by_id(db, user.organization_id) if user else None
        )
        if user is None or org is None or not org.is_active:
            error = UnauthorizedError("User not found or inactive")
            await self._record_failure(db, error, "refresh", user_id=user_id)
            raise error

        await auth_repository.add_audit_log(
            db, event="refresh", success=True, email=user.email, role=user.role,
            organization_id=user.organization_id, user_id=user.id,
        )
        return await self._authorized(db, user)

    async def logout(
        self,
        db: AsyncSession,
        refresh_token: str,
    ) -> None:
        """리프레시 토큰을 폐기합니다 (멱등).

        Revoke a refresh token. Unknown tokens are ignored.
        """
        stored: RefreshToken | None = await auth_repository.get_refresh_token(db, refresh_token)
        if stored is None or await auth_repository.delete_refresh_token(db, refresh_token) == 0:
            return
        await auth_repository.add_audit_log(db, event="logout", success=True, user_id=stored.user_id)

    async def get_me(
        self,
        db: AsyncSession,
        user: User,
    ) -> MeResponse:
        """현재 사용자 정보를 조직 정보와 함께 조회합니다."""
        org: Organization | None = await organization_repository.get_by_id(db, user.organization_id)
        if org is None:
            raise NotFoundError("Organization not found")
        return MeResponse(
            **user_service.to_response(user).model_dump(),
            organization_name=org.name,
            company_code=org.code,
        )


# 싱글턴 인스턴스: Singleton instance
auth_service: AuthService = AuthService()
