"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 예외 처리기, 라우터 등록.

FastAPI application entry point — Middleware, exception handlers and
router registration.

Run:
    uvicorn taskhub.main:app --reload
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from taskhub.config import settings
from taskhub.middleware.axiom_logging import REQUEST_ID_HEADER, AxiomLoggingMiddleware

app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# 요청 로깅 미들웨어: 요청 ID 부여 + Axiom 전송
# CORS보다 먼저 등록 (Registered before CORS so every request is captured)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어: Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER],
)


# PostgreSQL unique_violation SQLSTATE
UNIQUE_VIOLATION: str = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """유일성 위반 여부 — asyncpg sqlstate, or the driver message (SQLite)."""
    if getattr(exc.orig, "sqlstate", None) == UNIQUE_VIOLATION:
        return True
    return "unique" in str(exc.orig).lower()


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """DB 무결성 위반 → 409.

    Unique constraint races report "Resource already exists"; foreign key
    and NOT NULL violations get a generic conflict message.
    """
    if is_unique_violation(exc):
        return JSONResponse(status_code=409, content={"detail": "Resource already exists"})
    return JSONResponse(status_code=409, content={"detail": "Request conflicts with existing data"})


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록: Router registration
# auth_router: 인증 (setup / join / login / refresh / logout / me)
# task_management_router: 조직 범위 업무 관리 리소스 (Tenant-scoped resources)
# ---------------------------------------------------------------------------
from taskhub.api.auth import router as auth_router  # noqa: E402
from taskhub.api.task_management import task_management_router  # noqa: E402

app.include_router(auth_router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(task_management_router, prefix="/api/v1/task-management")
