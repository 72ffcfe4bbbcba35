"""인증 API 테스트.

Auth API tests — Tenant setup, role-scoped join/login, refresh rotation,
logout and the auth audit log.
"""

from datetime import timedelta

import pytest
from sqlalchemy import select, update

from taskhub.database import utcnow
from taskhub.models import AuthAuditLog, RefreshToken
from taskhub.repositories.auth_repository import auth_repository
from taskhub.services.auth_service import auth_service
from taskhub.utils.exceptions import UnauthorizedError
from tests.conftest import API, AUTH, PASSWORD, auth_header


async def _login(client, role: str, email: str, password: str = PASSWORD):
    return await client.post(f"{AUTH}/{role}/login", json={"email": email, "password": password})


class TestSetup:
    """테넌트 설정 테스트."""

    async def test_setup_creates_tenant_and_pmo(self, client):
        """조직 + pmo 생성, 기본 카탈로그 시드."""
        res = await client.post(f"{AUTH}/setup", json={
            "organization_name": "Acme",
            "email": "Founder@Acme.io",
            "password": "founder-pass",
            "name": "Founder",
        })
        assert res.status_code == 201
        data = res.json()
        assert data["role"] == "pmo"
        assert data["email"] == "founder@acme.io"
        assert data["token"]["access"]
        assert data["token"]["refresh"]

        headers = auth_header(data["token"]["access"])
        me = (await client.get(f"{AUTH}/me", headers=headers)).json()
        assert me["organization_name"] == "Acme"
        assert len(me["company_code"]) == 6

        statuses = (await client.get(f"{API}/task-statuses", headers=headers)).json()
        assert statuses["pagination"]["records"] == 4
        priorities = (await client.get(f"{API}/priorities", headers=headers)).json()
        assert priorities["pagination"]["records"] == 4

    async def test_setup_duplicate_email_is_audited(self, client, session_factory, pmo_user):
        """중복 이메일 409 + 실패 감사 로그."""
        res = await client.post(f"{AUTH}/setup", json={
            "organization_name": "Again",
            "email": "pmo@test.com",
            "password": "another-pass",
            "name": "Dup",
        })
        assert res.status_code == 409

        async with session_factory() as session:
            rows = (await session.execute(
                select(AuthAuditLog).where(AuthAuditLog.event == "setup")
            )).scalars().all()
        assert len(rows) == 1
        assert rows[0].success is False
        assert rows[0].email == "pmo@test.com"

    async def test_setup_rejects_short_password(self, client):
        res = await client.post(f"{AUTH}/setup", json={
            "organization_name": "Acme",
            "email": "a@acme.io",
            "password": "short",
            "name": "A",
        })
        assert res.status_code == 422


class TestJoin:
    """역할별 가입 테스트."""

    async def test_join_with_company_code(self, client, org):
        """회사 코드로 developer 가입 (코드 대소문자 무시)."""
        res = await client.post(f"{AUTH}/developer/join", json={
            "email": "new.dev@test.com",
            "password": PASSWORD,
            "name": "New Dev",
            "company_code": "test01",
        })
        assert res.status_code == 201
        data = res.json()
        assert data["role"] == "developer"
        assert data["organization_id"] == str(org.id)

    async def test_join_unknown_code(self, client, org):
        res = await client.post(f"{AUTH}/qa/join", json={
            "email": "x@test.com",
            "password": PASSWORD,
            "name": "X",
            "company_code": "NOPE00",
        })
        assert res.status_code == 404

    async def test_join_duplicate_email(self, client, dev_user):
        res = await client.post(f"{AUTH}/qa/join", json={
            "email": "DEV@test.com",
            "password": PASSWORD,
            "name": "Dup",
            "company_code": "TEST01",
        })
        assert res.status_code == 409

    async def test_join_unknown_role(self, client, org):
        """정의되지 않은 역할 경로 422."""
        res = await client.post(f"{AUTH}/ceo/join", json={
            "email": "ceo@test.com",
            "password": PASSWORD,
            "name": "Ceo",
            "company_code": "TEST01",
        })
        assert res.status_code == 422

    async def test_join_invalid_email(self, client, org):
        res = await client.post(f"{AUTH}/qa/join", json={
            "email": "not-an-email",
            "password": PASSWORD,
            "name": "Bad",
            "company_code": "TEST01",
        })
        assert res.status_code == 422


class TestLogin:
    """로그인 테스트."""

    async def test_login_success(self, client, dev_user):
        res = await _login(client, "developer", "Dev@Test.com")
        assert res.status_code == 200
        data = res.json()
        assert data["id"] == str(dev_user.id)
        assert data["token"]["expired_at"].endswith(("Z", "+00:00"))

    async def test_login_wrong_password(self, client, dev_user):
        res = await _login(client, "developer", "dev@test.com", "wrong-password")
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid credentials"

    async def test_login_role_mismatch(self, client, dev_user):
        """다른 역할 경로로 로그인 시 동일한 401."""
        res = await _login(client, "pm", "dev@test.com")
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid credentials"

    async def test_login_unknown_email(self, client, org):
        res = await _login(client, "pm", "ghost@test.com")
        assert res.status_code == 401

    async def test_failed_login_is_audited(self, client, session_factory, dev_user):
        await _login(client, "developer", "dev@test.com", "wrong-password")
        async with session_factory() as session:
            row = (await session.execute(
                select(AuthAuditLog).where(AuthAuditLog.event == "login")
            )).scalar_one()
        assert row.success is False
        assert row.reason == "wrong password"
        assert row.user_id == dev_user.id

    async def test_deleted_user_cannot_login(self, client, pmo_token, dev_user):
        res = await client.delete(f"{API}/users/{dev_user.id}", headers=auth_header(pmo_token))
        assert res.status_code == 204
        res = await _login(client, "developer", "dev@test.com")
        assert res.status_code == 401

    async def test_inactive_organization_cannot_login(self, client, pmo_token, dev_user):
        res = await client.put(f"{API}/organization", json={"is_active": False}, headers=auth_header(pmo_token))
        assert res.status_code == 200
        res = await _login(client, "developer", "dev@test.com")
        assert res.status_code == 401

    async def test_inactive_organization_rejects_access_tokens(self, client, pmo_token, dev_token):
        """비활성 조직의 기존 액세스 토큰도 거부."""
        res = await client.put(f"{API}/organization", json={"is_active": False}, headers=auth_header(pmo_token))
        assert res.status_code == 200
        res = await client.get(f"{AUTH}/me", headers=auth_header(dev_token))
        assert res.status_code == 401
        res = await client.get(f"{API}/users", headers=auth_header(pmo_token))
        assert res.status_code == 401


class TestTokens:
    """토큰 갱신/로그아웃 테스트."""

    async def test_refresh_rotates_token(self, client, dev_user):
        tokens = (await _login(client, "developer", "dev@test.com")).json()["token"]
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh"]})
        assert res.status_code == 200
        rotated = res.json()["token"]
        assert rotated["refresh"] != tokens["refresh"]

        # 이전 리프레시 토큰은 재사용 불가 (The old refresh token is spent)
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh"]})
        assert res.status_code == 401

    async def test_access_token_cannot_refresh(self, client, dev_token):
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": dev_token})
        assert res.status_code == 401

    async def test_garbage_refresh_token(self, client, org):
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": "not.a.jwt"})
        assert res.status_code == 401

    async def test_refresh_token_cannot_authenticate(self, client, dev_user):
        tokens = (await _login(client, "developer", "dev@test.com")).json()["token"]
        res = await client.get(f"{AUTH}/me", headers=auth_header(tokens["refresh"]))
        assert res.status_code == 401

    async def test_logout_revokes_refresh_token(self, client, dev_user):
        tokens = (await _login(client, "developer", "dev@test.com")).json()["token"]
        res = await client.post(f"{AUTH}/logout", json={"refresh_token": tokens["refresh"]})
        assert res.status_code == 204
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh"]})
        assert res.status_code == 401
        # 멱등: Logging out twice is fine
        res = await client.post(f"{AUTH}/logout", json={"refresh_token": tokens["refresh"]})
        assert res.status_code == 204

    async def test_expired_stored_refresh_token(self, client, session_factory, dev_user):
        """저장된 만료 시각이 지난 리프레시 토큰은 401."""
        tokens = (await _login(client, "developer", "dev@test.com")).json()["token"]
        async with session_factory() as session:
            await session.execute(
                update(RefreshToken)
                .where(RefreshToken.token == tokens["refresh"])
                .values(expires_at=utcnow() - timedelta(minutes=1))
            )
            await session.commit()
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh"]})
        assert res.status_code == 401

    async def test_refresh_is_audited(self, client, session_factory, dev_user):
        tokens = (await _login(client, "developer", "dev@test.com")).json()["token"]
        await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh"]})
        await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh"]})
        async with session_factory() as session:
            rows = (await session.execute(
                select(AuthAuditLog)
                .where(AuthAuditLog.event == "refresh")
                .order_by(AuthAuditLog.created_at, AuthAuditLog.id)
            )).scalars().all()
        assert sorted(row.success for row in rows) == [False, True]
        assert all(row.user_id == dev_user.id for row in rows if row.success)

    async def test_logout_is_audited(self, client, session_factory, dev_user):
        tokens = (await _login(client, "developer", "dev@test.com")).json()["token"]
        await client.post(f"{AUTH}/logout", json={"refresh_token": tokens["refresh"]})
        await client.post(f"{AUTH}/logout", json={"refresh_token": tokens["refresh"]})
        async with session_factory() as session:
            rows = (await session.execute(
                select(AuthAuditLog).where(AuthAuditLog.event == "logout")
            )).scalars().all()
        assert len(rows) == 1
        assert rows[0].success is True
        assert rows[0].user_id == dev_user.id

    async def test_spent_refresh_token_cannot_rotate_twice(self, client, session_factory, dev_user):
        """회전된 토큰으로 재요청 시 새 토큰이 발급되지 않음."""
        tokens = (await _login(client, "developer", "dev@test.com")).json()["token"]
        first = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh"]})
        second = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh"]})
        assert first.status_code == 200
        assert second.status_code == 401
        async with session_factory() as session:
            stored = (await session.execute(
                select(RefreshToken).where(RefreshToken.user_id == dev_user.id)
            )).scalars().all()
        assert [t.token for t in stored] == [first.json()["token"]["refresh"]]

    async def test_rotation_fails_when_token_already_deleted(self, client, db, dev_user, monkeypatch):
        """동시 회전에서 삭제 건수가 0이면 거부."""
        tokens = (await _login(client, "developer", "dev@test.com")).json()["token"]

        async def _spent_elsewhere(session, token):
            return 0

        monkeypatch.setattr(auth_repository, "delete_refresh_token", _spent_elsewhere)
        with pytest.raises(UnauthorizedError):
            await auth_service.refresh(db, tokens["refresh"])

    async def test_deleting_user_revokes_refresh_tokens(self, client, pmo_token, dev_user):
        tokens = (await _login(client, "developer", "dev@test.com")).json()["token"]
        await client.delete(f"{API}/users/{dev_user.id}", headers=auth_header(pmo_token))
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh"]})
        assert res.status_code == 401


class TestMe:
    """현재 사용자 조회 테스트."""

    async def test_me(self, client, dev_token, dev_user):
        res = await client.get(f"{AUTH}/me", headers=auth_header(dev_token))
        assert res.status_code == 200
        data = res.json()
        assert data["email"] == "dev@test.com"
        assert data["company_code"] == "TEST01"

    async def test_me_requires_token(self, client):
        res = await client.get(f"{AUTH}/me")
        assert res.status_code == 401

    async def test_me_with_invalid_token(self, client):
        res = await client.get(f"{AUTH}/me", headers=auth_header("garbage"))
        assert res.status_code == 401
