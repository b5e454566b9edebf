"""
E-Voting API - Main Server

Builds the FastAPI application around an explicitly constructed
``DatabaseService``:
- Authentication and identity (JWT bearer tokens)
- OTP verification and admin recovery (public)
- User administration (role-gated)
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import (
    admin_recovery_router,
    auth_router,
    users_router,
    verification_router,
)
from .connection import DatabaseService
from .core.config import Settings, load_settings
from .core.exceptions import EVotingException
from .gates import TokenGate
from .lifecycle import LifecycleManager, LifecycleState
from .services import LoggingOtpSender, OtpSender


VERSION = "1.0.0"
LOCALHOST_ORIGIN_REGEX = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events.

    Starts the database when the app was built without an already-started
    lifecycle (e.g. ``uvicorn --factory``); a failed probe aborts startup.
    """
    lifecycle: Optional[LifecycleManager] = app.state.lifecycle
    if lifecycle is not None and lifecycle.state is LifecycleState.UNINITIALIZED:
        await lifecycle.start()
    logger.info("E-Voting API started")
    yield
    logger.info("E-Voting API shutting down")
    if lifecycle is not None:
        await lifecycle.shutdown()


def _error_response(exc: EVotingException) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "reason": exc.reason},
        headers=headers,
    )


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[DatabaseService] = None,
    lifecycle: Optional[LifecycleManager] = None,
    otp_sender: Optional[OtpSender] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = load_settings()
    if database is None:
        database = DatabaseService.from_settings(settings)
        lifecycle = lifecycle or LifecycleManager(database)

    app = FastAPI(
        title="E-Voting API",
        description="Election administration backend",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.lifecycle = lifecycle
    app.state.token_gate = TokenGate(settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    app.state.otp_sender = otp_sender or LoggingOtpSender()

    # CORS: explicit origins, plus any localhost port outside production
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_origin_regex=None if settings.is_production else LOCALHOST_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        origin = request.headers.get("origin", "none")
        logger.info(f"{request.method} {request.url.path} - Origin: {origin}")
        return await call_next(request)

    @app.exception_handler(EVotingException)
    async def evoting_exception_handler(request: Request, exc: EVotingException):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc.message}")
        return _error_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = "Route not found" if exc.status_code == 404 else exc.detail
        return JSONResponse(status_code=exc.status_code, content={"error": message})

    @app.get("/api/health", tags=["health"])
    async def health_check():
        """Liveness plus a database probe."""
        database_up = await app.state.database.probe()
        return JSONResponse(
            status_code=status.HTTP_200_OK if database_up else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "OK" if database_up else "DEGRADED",
                "message": "E-Voting System API is running",
                "database": "up" if database_up else "down",
                "version": VERSION,
            },
        )

    app.include_router(auth_router, prefix="/api")
    app.include_router(admin_recovery_router, prefix="/api")
    app.include_router(users_router, prefix="/api")
    app.include_router(verification_router, prefix="/api")

    logger.info(f"CORS enabled for: {', '.join(settings.allowed_origins)}")
    return app
