"""JWT 토큰 생성 및 검증 유틸리티 모듈.

JWT token creation and verification utility module.

JWT Payload Structure:
    {
        "sub": "user_uuid",          # 사용자 ID (User identifier)
        "org": "organization_uuid",  # 조직 ID (Tenant identifier)
        "role": "pmo",               # 역할 이름 (Role name)
        "exp": 1234567890,           # 만료 시간 UNIX timestamp (Expiration)
        "type": "access"|"refresh",  # 토큰 유형 (Token type discriminator)
        "jti": "..."                 # 리프레시 토큰 전용 고유 ID (Refresh tokens only)
    }
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from taskhub.config import settings


def access_token_expiry() -> datetime:
    """액세스 토큰 만료 시각 — Expiry for an access token issued now."""
    return datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)


def refresh_token_expiry() -> datetime:
    """리프레시 토큰 만료 시각 — Expiry for a refresh token issued now."""
    return datetime.now(timezone.utc) + timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)


def create_access_token(data: dict[str, Any], expires_at: datetime | None = None) -> str:
    """JWT 액세스 토큰을 생성합니다.

    Generate a JWT access token with the given payload data.
    Token expires after JWT_ACCESS_TOKEN_EXPIRE_MINUTES unless expires_at is given.

    Args:
        data: JWT 페이로드 데이터 — {"sub": user_id, "org": org_id, "role": role}
        expires_at: 만료 시각 (Explicit expiry; defaults to the configured TTL)

    Returns:
        str: 인코딩된 JWT 문자열 (Encoded JWT token string)
    """
    to_encode: dict[str, Any] = data.copy()
    to_encode.update({"exp": expires_at or access_token_expiry(), "type": "access"})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_refresh_token(data: dict[str, Any], expires_at: datetime | None = None) -> str:
    """JWT 리프레시 토큰을 생성합니다.

    Generate a JWT refresh token. A random jti keeps two tokens issued in the
    same second for the same user distinct, since refresh tokens are stored
    under a unique constraint.
    """
    to_encode: dict[str, Any] = data.copy()
    to_encode.update({
        "exp": expires_at or refresh_token_expiry(),
        "type": "refresh",
        "jti": secrets.token_hex(16),
    })
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """JWT 토큰을 디코딩하고 검증합니다.

    Decode and verify a JWT token string.

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
