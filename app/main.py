"""
Sociedad Reservations - FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
import structlog

from app.config import settings
from app.database import SessionLocal, init_models
from app.engine.errors import (
    EngineError,
    ConflictError,
    NotFound,
    PermissionDenied,
)
from app.api import auth, bookings, blocked_slots, export, activity


def configure_logging() -> None:
    """Key/value logging through the stdlib root logger, JSON unless log_format says console"""
    logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.log_format == "console"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Starting Sociedad Reservations API",
        version="1.0.0",
        enforce_blocked_slots=settings.enforce_blocked_slots,
    )
    await init_models()
    yield
    logger.info("Shutting down Sociedad Reservations API")


app = FastAPI(
    title="Sociedad Reservations",
    description="Dining table and oven reservations for a residential community",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def status_code_for(error: EngineError) -> int:
    if isinstance(error, ConflictError):
        return 409
    if isinstance(error, PermissionDenied):
        return 403
    if isinstance(error, NotFound):
        return 404
    return 400


@app.exception_handler(EngineError)
async def engine_error_handler(request: Request, exc: EngineError):
    """Render typed engine outcomes with their structured details"""
    return JSONResponse(status_code=status_code_for(exc), content=exc.to_dict())


@app.get("/health")
async def health():
    return {"status": "healthy", "service": "reservations", "version": "1.0.0"}


@app.get("/health/ready")
async def ready():
    """Database and notification broker reachability"""
    checks = {}

    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"failed: {e}"

    # Bookings still work without the broker; only notifications are delayed
    try:
        from app.jobs.celery_app import celery_app
        celery_app.control.ping(timeout=1)
        checks["broker"] = "ok"
    except Exception as e:
        checks["broker"] = f"failed: {e}"

    return {
        "status": "ready" if checks["database"] == "ok" else "not_ready",
        "checks": checks,
    }


app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])
app.include_router(blocked_slots.router, prefix="/blocked-slots", tags=["Blocked Slots"])
app.include_router(export.router, prefix="/export", tags=["Export"])
app.include_router(activity.router, prefix="/activity", tags=["Activity"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
