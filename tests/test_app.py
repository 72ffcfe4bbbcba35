"""앱 공통 동작 테스트 — 헬스 체크, 요청 ID, 로깅 미들웨어, 예외 처리기.

Application-level tests — Health check, request id propagation, the
Axiom logging middleware and the integrity error handler.
"""

import json
from unittest.mock import MagicMock

from fastapi import FastAPI, HTTPException
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import IntegrityError

from taskhub.main import integrity_error_handler, is_unique_violation
from taskhub.middleware.axiom_logging import REQUEST_ID_HEADER, AxiomLoggingMiddleware, mask_sensitive
from tests.conftest import AUTH


def _logged_app(axiom: MagicMock) -> FastAPI:
    app = FastAPI()
    app.add_middleware(AxiomLoggingMiddleware, client=axiom)

    @app.post("/echo")
    async def echo(payload: dict) -> dict:
        return payload

    @app.get("/fail")
    async def fail() -> None:
        raise HTTPException(status_code=409, detail="Project code already exists")

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    return app


def _client(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestHealth:
    """헬스 체크 및 요청 ID 테스트."""

    async def test_health(self, client):
        res = await client.get("/health")
        assert res.status_code == 200
        assert res.json() == {"status": "ok"}

    async def test_request_id_generated(self, client):
        res = await client.get("/health")
        assert res.headers[REQUEST_ID_HEADER]

    async def test_request_id_echoed(self, client):
        res = await client.get(f"{AUTH}/me", headers={REQUEST_ID_HEADER: "req-123"})
        assert res.status_code == 401
        assert res.headers[REQUEST_ID_HEADER] == "req-123"


class TestAxiomLogging:
    """로깅 미들웨어 테스트."""

    def test_mask_sensitive(self):
        masked = mask_sensitive({
            "email": "a@b.c",
            "password": "secret123",
            "nested": {"refresh_token": "abc", "items": [{"api_key": "k"}]},
        })
        assert masked["email"] == "a@b.c"
        assert masked["password"] == "***"
        assert masked["nested"]["refresh_token"] == "***"
        assert masked["nested"]["items"][0]["api_key"] == "***"

    async def test_ships_masked_event(self):
        axiom = MagicMock()
        async with _client(_logged_app(axiom)) as ac:
            res = await ac.post("/echo", json={"email": "a@b.c", "password": "hunter22"})
        assert res.status_code == 200

        axiom.ingest_events.assert_called_once()
        _, events = axiom.ingest_events.call_args.args
        event = events[0]
        assert event["method"] == "POST"
        assert event["path"] == "/echo"
        assert event["status_code"] == 200
        assert event["request_body"] == {"email": "a@b.c", "password": "***"}
        assert event["request_id"] == res.headers[REQUEST_ID_HEADER]

    async def test_error_detail_captured(self):
        axiom = MagicMock()
        async with _client(_logged_app(axiom)) as ac:
            res = await ac.get("/fail")
        assert res.status_code == 409
        assert res.json()["detail"] == "Project code already exists"
        event = axiom.ingest_events.call_args.args[1][0]
        assert event["error"] == "Project code already exists"

    async def test_skips_health(self):
        axiom = MagicMock()
        async with _client(_logged_app(axiom)) as ac:
            await ac.get("/health")
        axiom.ingest_events.assert_not_called()

    async def test_shipping_failure_does_not_break_request(self):
        axiom = MagicMock()
        axiom.ingest_events.side_effect = RuntimeError("axiom down")
        async with _client(_logged_app(axiom)) as ac:
            res = await ac.post("/echo", json={"ok": True})
        assert res.status_code == 200


class _DriverError(Exception):
    def __init__(self, message: str, sqlstate: str) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate


class TestIntegrityErrorHandler:
    """DB 무결성 오류 처리기 테스트."""

    async def test_sqlite_unique_violation(self):
        exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: projects.code"))
        res = await integrity_error_handler(None, exc)
        assert res.status_code == 409
        assert json.loads(res.body) == {"detail": "Resource already exists"}

    async def test_postgres_unique_violation_by_sqlstate(self):
        exc = IntegrityError("INSERT", {}, _DriverError("duplicate key value", "23505"))
        assert is_unique_violation(exc)

    async def test_foreign_key_violation_is_generic(self):
        """유일성 외 위반은 일반 메시지."""
        exc = IntegrityError("INSERT", {}, _DriverError("violates foreign key constraint", "23503"))
        res = await integrity_error_handler(None, exc)
        assert res.status_code == 409
        assert json.loads(res.body) == {"detail": "Request conflicts with existing data"}

    async def test_not_null_violation_is_generic(self):
        exc = IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed: tasks.title"))
        res = await integrity_error_handler(None, exc)
        assert json.loads(res.body)["detail"] == "Request conflicts with existing data"
