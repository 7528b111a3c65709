# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
Ministry Scheduler Service
==========================
Volunteer scheduling for eucharistic ministers: service-time definitions
(weekly recurring or one-off) are materialized into dated slots that
ministers claim and release.

Slot state machine:
    open ─► assigned(minister) ─► open

Invariant: a minister holds at most one position per service per day.

Port: 8005
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ministry_scheduler.controllers import (
    calendar_controller,
    minister_controller,
    service_time_controller,
    system_controller,
)
from ministry_scheduler.core.config import settings
from ministry_scheduler.core.database import init_schema
from ministry_scheduler.core.dependencies import engine, get_calendar_service
from ministry_scheduler.core.errors import SchedulingError, StorageError
from ministry_scheduler.core.logging import get_logger
from ministry_scheduler.middleware import MetricsMiddleware, RequestIDMiddleware
from ministry_scheduler.schemas.calendar import ErrorResponse

logger = get_logger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    try:
        init_schema(engine)
        if settings.SEED_DEFAULT_DATA:
            get_calendar_service().seed_defaults()
    except StorageError:
        logger.warning("Could not prepare database: it may not be ready yet")
    except Exception:
        logger.exception("Database initialisation failed")
    logger.info("%s %s started", settings.SERVICE_NAME, settings.SERVICE_VERSION)
    yield
    engine.dispose()
    logger.info("Shutting down: connection pool disposed")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Ministry Scheduler Service",
    description="Calendar of services and minister sign-ups with one-position-per-service enforcement.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        404: {"model": ErrorResponse, "description": "Not found"},
        409: {"model": ErrorResponse, "description": "Conflict"},
        503: {"model": ErrorResponse, "description": "Storage unavailable"},
    },
)

app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Exception handlers ────────────────────────────────────────────────────
@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    req_id = getattr(request.state, "request_id", None)
    if isinstance(exc, StorageError):
        logger.error("Storage failure: %s", exc.message, extra={"request_id": req_id})
        detail = "The schedule could not be saved right now, please try again"
    else:
        detail = exc.message
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": detail, "request_id": req_id},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    req_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled exception", extra={"request_id": req_id})
    return JSONResponse(
        status_code=500,
        content={"error": "internal_server_error", "detail": str(exc), "request_id": req_id},
    )


# ── Routers ───────────────────────────────────────────────────────────────
app.include_router(system_controller.router)
app.include_router(service_time_controller.router)
app.include_router(calendar_controller.router)
app.include_router(minister_controller.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.SERVICE_PORT)
