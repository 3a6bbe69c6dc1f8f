from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import os
import time

from core.config import QA_MODE
from recruitai.api.deps import get_session_registry
from recruitai.api.interview import router as interview_router
from recruitai.api.mock_test import router as mock_test_router
from recruitai.api.proctoring import router as proctoring_router
from recruitai.auth import get_user_id
from recruitai.rate_limit import FixedWindowRateLimiter
from recruitai.scheduling import PeriodicTask
from recruitai.session.registry import SessionRegistry, session_registry
from recruitai.system_metrics import get_metrics_snapshot, set_metric

app = FastAPI(title="RecruitAI Proctoring & Interview Analysis")
logger = logging.getLogger("recruitai.main")


def _get_allowed_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if not raw:
        return [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    return [item.strip() for item in raw.split(",") if item.strip()]


_allowed_origins = _get_allowed_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

RATE_LIMIT_ENABLED = str(os.getenv("RATE_LIMIT_ENABLED", "true")).strip().lower() in {"1", "true", "yes", "on"}
RATE_LIMIT_WINDOW_SEC = max(10, int(os.getenv("RATE_LIMIT_WINDOW_SEC", "60")))
# frame registration can arrive many times per second from one client
RATE_LIMIT_MAX_REQUESTS = max(20, int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "6000")))
rate_limiter = FixedWindowRateLimiter(RATE_LIMIT_WINDOW_SEC, RATE_LIMIT_MAX_REQUESTS)
SESSION_CLEANUP_TTL_SEC = max(60, int(os.getenv("SESSION_CLEANUP_TTL_SEC", "1800")))
SESSION_CLEANUP_INTERVAL_SEC = max(30, int(os.getenv("SESSION_CLEANUP_INTERVAL_SEC", "120")))
_cleanup_task: PeriodicTask | None = None


def _request_identity(request: Request) -> str:
    forwarded_for = str(request.headers.get("x-forwarded-for") or "").strip()
    if forwarded_for:
        return forwarded_for.split(",")[0].strip() or "unknown"
    if request.client and request.client.host:
        return str(request.client.host)
    return "unknown"


@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    if not RATE_LIMIT_ENABLED:
        return await call_next(request)

    path = request.url.path
    if request.method == "OPTIONS" or path.startswith("/docs") or path.startswith("/redoc") or path.startswith("/openapi.json"):
        return await call_next(request)

    blocked, retry_after = await rate_limiter.check(_request_identity(request), time.time())
    if blocked:
        return JSONResponse(
            status_code=429,
            content={
                "detail": "Rate limit exceeded",
                "retry_after_sec": retry_after,
            },
            headers={"Retry-After": str(retry_after)},
        )

    return await call_next(request)


async def _periodic_cleanup() -> None:
    removed = session_registry.cleanup_inactive(SESSION_CLEANUP_TTL_SEC)
    if removed > 0:
        logger.info("[SYSTEM] cleaned inactive proctoring sessions=%s", removed)
    await rate_limiter.prune(time.time())


@app.on_event("startup")
async def startup_banner():
    global _cleanup_task
    if QA_MODE:
        logger.info("[SYSTEM] QA_MODE ENABLED")
    logger.info("[SYSTEM] CORS allow_origins=%s", _allowed_origins)
    logger.info(
        "[SYSTEM] rate_limit enabled=%s window_sec=%s max_requests=%s",
        RATE_LIMIT_ENABLED,
        RATE_LIMIT_WINDOW_SEC,
        RATE_LIMIT_MAX_REQUESTS,
    )

    _cleanup_task = PeriodicTask(_periodic_cleanup, SESSION_CLEANUP_INTERVAL_SEC, name="periodic-cleanup")
    _cleanup_task.start()


@app.on_event("shutdown")
async def shutdown_handler():
    global _cleanup_task
    if _cleanup_task is not None:
        await _cleanup_task.aclose()
        _cleanup_task = None
    stopped = session_registry.stop_all()
    logger.info("[SYSTEM] shutdown complete | sessions_stopped=%s", stopped)


@app.get("/healthz")
async def healthz():
    return {"status": "ok", "service": "backend"}


@app.get("/api/system/metrics")
def system_metrics_route(request: Request, registry: SessionRegistry = Depends(get_session_registry)):
    get_user_id(request)
    set_metric("proctoring_sessions_active", float(registry.active_count()))
    return get_metrics_snapshot(extra={
        "session_cleanup_ttl_sec": SESSION_CLEANUP_TTL_SEC,
    })


app.include_router(proctoring_router)
app.include_router(interview_router)
app.include_router(mock_test_router)
