"""
Habit Tracker Backend — FastAPI Application Factory
=====================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires components explicitly, registers middleware and
       exception handlers, mounts routers, and returns the app.
Who:   uvicorn (uvicorn habit_tracker.main:app) and the test-suite.

Component wiring (built once, shared by all requests):
    PasswordHasher ─┐
    TokenService ───┼─► AccountService ─┐
    AccountRepository ┤                 ├─► app.state ─► routes via Depends()
    HabitRepository ──┴─► HabitService ─┘

Exception Handlers:
    ValidationError / RequestValidationError → 400
    AuthenticationError                      → 401
    NotFoundError                            → 404
    ConflictError                            → 409
    DatabaseError                            → 500 (generic message)
    Exception                                → 500 (stack trace logged)

Lifecycle:
    Startup:  logging setup, configuration check, ready log line
    Shutdown: dispose database engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from habit_tracker import __version__
from habit_tracker.config import settings
from habit_tracker.database import dispose_engine
from habit_tracker.exceptions import (
    AuthenticationError,
    DatabaseError,
    HabitTrackerError,
)
from habit_tracker.middleware.auth import AuthenticationMiddleware
from habit_tracker.middleware.logging import RequestLoggingMiddleware
from habit_tracker.middleware.rate_limit import RateLimitMiddleware
from habit_tracker.middleware.request_id import RequestIDMiddleware, request_id_var
from habit_tracker.repositories import AccountRepository, HabitRepository
from habit_tracker.routes import accounts, habits, health
from habit_tracker.security import PasswordHasher, TokenService
from habit_tracker.services.account_service import AccountService
from habit_tracker.services.habit_service import HabitService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s on stdout.
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Habit Tracker Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Habit Tracker Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(code: str, message: str, rid: str, details=None) -> dict:
    body = {"error": code, "message": message, "request_id": rid}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the ErrorResponse format.

    Every HabitTrackerError subclass carries its own status_code and
    error_code; DatabaseError and unexpected exceptions never expose
    internal details in the response body.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Schema-level problems: missing fields, wrong types, bad email syntax."""
        rid = request_id_var.get("")
        errors = [
            {
                "loc": [str(part) for part in err.get("loc", ())],
                "msg": err.get("msg", ""),
                "type": err.get("type", ""),
            }
            for err in exc.errors()
        ]
        logger.warning("[%s] Request validation failed: %d error(s)", rid, len(errors))
        return JSONResponse(
            status_code=400,
            content=_error_body(
                "validation_error",
                "Request body or parameters are invalid",
                rid,
                {"errors": errors},
            ),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                exc.error_code,
                "An internal error occurred. Please try again later.",
                rid,
            ),
        )

    @app.exception_handler(HabitTrackerError)
    async def handle_app_error(request: Request, exc: HabitTrackerError):
        """ValidationError, InvalidReferenceError, AuthenticationError, NotFoundError, ConflictError."""
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)

        headers = None
        if isinstance(exc, AuthenticationError):
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message, rid, exc.context),
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Served outside RequestIDMiddleware, so the header is set here."""
        rid = getattr(request.state, "request_id", "") or request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
                rid,
            ),
            headers={"X-Request-ID": rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def build_services(app: FastAPI) -> None:
    """Construct hashing, token, persistence and service components once."""
    hasher = PasswordHasher()
    tokens = TokenService()
    account_repository = AccountRepository()
    habit_repository = HabitRepository()

    app.state.token_service = tokens
    app.state.account_service = AccountService(
        accounts=account_repository,
        hasher=hasher,
        tokens=tokens,
    )
    app.state.habit_service = HabitService(
        habits=habit_repository,
        accounts=account_repository,
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Habit Tracker API",
        description="Account registration, authentication and habit tracking.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    build_services(app)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first. Resulting order on the way in:
    # CORS → RequestID → RateLimit → Logging → Auth → GZip → route
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(AuthenticationMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After", "WWW-Authenticate"],
    )

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(accounts.router)
    app.include_router(habits.router)
    app.include_router(health.router)

    return app


app = create_app()
