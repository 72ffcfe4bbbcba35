"""요청 로깅 미들웨어 — 요청 ID 부여 및 Axiom 구조화 로그 전송.

Request logging middleware.
Every request gets an X-Request-ID (echoed from the client or generated)
that is returned on the response. When Axiom is configured, one structured
event per request is shipped with the method, path, status, duration,
masked query/body, error detail and the authenticated role.
"""

import json
import re
import time
import uuid
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from taskhub.config import settings

REQUEST_ID_HEADER: str = "X-Request-ID"

# 마스킹 대상 키: Keys whose values never leave the process
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|refresh|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로: Paths excluded from shipping
_SKIP_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})

_MAX_DEPTH: int = 5
_MAX_ITEMS: int = 20
_MAX_TEXT: int = 500


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """민감 필드 재귀 마스킹 — Recursively replace sensitive values with "***"."""
    if depth > _MAX_DEPTH:
        return "..."
    if isinstance(data, dict):
        return {
            key: "***" if _SENSITIVE_KEYS.search(str(key)) else mask_sensitive(value, depth + 1)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:_MAX_ITEMS]]
    if isinstance(data, str) and len(data) > _MAX_TEXT:
        return data[:_MAX_TEXT] + "...(truncated)"
    return data


def _error_detail(body: bytes) -> str:
    """에러 응답 본문에서 사유 추출 — Pull "detail" out of an error body."""
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:_MAX_TEXT]
    detail = payload.get("detail", payload) if isinstance(payload, dict) else payload
    text: str = detail if isinstance(detail, str) else json.dumps(detail, default=str)
    return text[:_MAX_TEXT]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """요청 ID 부여 및 Axiom 로그 전송 미들웨어.

    Assigns request ids and, when AXIOM_API_TOKEN and AXIOM_DATASET are both
    set, ships one event per request. Shipping errors are swallowed so a
    logging outage never turns into a failed request.
    """

    def __init__(self, app: Any, client: AxiomClient | None = None) -> None:
        super().__init__(app)
        self._dataset: str = settings.AXIOM_DATASET
        self._client: AxiomClient | None = client
        if self._client is None and settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def _read_body(self, request: Request) -> Any:
        if request.method not in ("POST", "PUT", "PATCH"):
            return None
        body: bytes = await request.body()
        if not body:
            return None
        try:
            return mask_sensitive(json.loads(body))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(non-json body)"

    async def _ship(self, event: dict[str, Any]) -> None:
        try:
            await run_in_threadpool(self._client.ingest_events, self._dataset, [event])
        except Exception:  # noqa: BLE001
            pass  # 로그 전송 실패는 요청에 영향 없음 (Log shipping never fails a request)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id: str = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        path: str = request.url.path
        if self._client is None or path in _SKIP_PATHS:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        started: float = time.perf_counter()
        request_body: Any = await self._read_body(request)
        status_code: int = 500
        error: str | None = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            if status_code >= 400:
                # 스트리밍 본문을 소비했으므로 다시 감싸서 반환 (Re-wrap the consumed body)
                body: bytes = b"".join(
                    [chunk if isinstance(chunk, bytes) else chunk.encode("utf-8") async for chunk in response.body_iterator]
                )
                error = _error_detail(body)
                response = Response(
                    content=body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception as exc:
            error = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event: dict[str, Any] = {
                "request_id": request_id,
                "method": request.method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                "role": getattr(request.state, "user_role", None),
            }
            if request.query_params:
                event["query_params"] = mask_sensitive(dict(request.query_params))
            if request_body is not None:
                event["request_body"] = request_body
            if error:
                event["error"] = error
            await self._ship(event)
