"""인증 레포지토리 — 리프레시 토큰 CRUD 및 인증 감사 로그.

Auth Repository — Refresh token lifecycle and the append-only auth audit log.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.token import AuthAuditLog, RefreshToken


class AuthRepository:
    """인증 관련 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling authentication-related database queries.
    Refresh tokens are hard-deleted; audit rows are only ever inserted.
    """

    async def create_refresh_token(
        self,
        db: AsyncSession,
        user_id: UUID,
        token: str,
        expires_at: datetime,
    ) -> RefreshToken:
        """새 리프레시 토큰을 저장합니다.

        Persist a new refresh token record.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 토큰 소유자 사용자 ID (Token owner user UUID)
            token: JWT 리프레시 토큰 문자열 (JWT refresh token string)
            expires_at: 토큰 만료 일시 (Token expiration timestamp)

        Returns:
            RefreshToken: 생성된 리프레시 토큰 레코드 (Created refresh token record)
        """
        db_token: RefreshToken = RefreshToken(
            user_id=user_id,
            token=token,
            expires_at=expires_at,
        )
        db.add(db_token)
        await db.flush()
        return db_token

    async def get_refresh_token(
        self,
        db: AsyncSession,
        token: str,
    ) -> RefreshToken | None:
        """토큰 문자열로 리프레시 토큰을 조회합니다 — Look up a stored refresh token."""
        query: Select = select(RefreshToken).where(RefreshToken.token == token)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def delete_refresh_token(
        self,
        db: AsyncSession,
        token: str,
    ) -> int:
        """리프레시 토큰을 삭제합니다 (로그아웃/회전).

        Delete a refresh token (logout or rotation) and return the number of
        rows removed. 0 means another request already spent the token.
        """
        result = await db.execute(delete(RefreshToken).where(RefreshToken.token == token))
        await db.flush()
        return result.rowcount

    async def delete_user_refresh_tokens(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> None:
        """사용자의 모든 리프레시 토큰을 삭제합니다.

        Delete all refresh tokens of a user (account deletion).
        """
        await db.execute(delete(RefreshToken).where(RefreshToken.user_id == user_id))
        await db.flush()

    async def add_audit_log(
        self,
        db: AsyncSession,
        event: str,
        success: bool,
        email: str | None = None,
        role: str | None = None,
        organization_id: UUID | None = None,
        user_id: UUID | None = None,
        reason: str | None = None,
    ) -> AuthAuditLog:
        """인증 시도 감사 로그를 추가합니다.

        Append one auth audit row.
        """
        entry: AuthAuditLog = AuthAuditLog(
            event=event,
            success=success,
            email=email,
            role=role,
            organization_id=organization_id,
            user_id=user_id,
            reason=reason,
        )
        db.add(entry)
        await db.flush()
        return entry

    async def list_audit_logs(
        self,
        db: AsyncSession,
        email: str,
    ) -> list[AuthAuditLog]:
        """이메일별 감사 로그 조회 — Audit rows for an email, oldest first."""
        query: Select = (
            select(AuthAuditLog)
            .where(AuthAuditLog.email == email)
            .order_by(AuthAuditLog.created_at, AuthAuditLog.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())


# 싱글턴 인스턴스: Singleton instance
auth_repository: AuthRepository = AuthRepository()
