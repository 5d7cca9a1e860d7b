"""
Pixeloria Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, exception
       handling and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`app.main:app`), `python -m app`, the serverless adapter in
       api/index.py, and the test suite (with its own settings/database).

Application Architecture:
    ┌────────────────────────────────────────────────────────────┐
    │                        FastAPI App                         │
    │                                                            │
    │  Middleware Chain (outermost first):                       │
    │  Security headers → Origin allow-list → CORS → Request ID  │
    │  → Access log → Body limit → Rate limit → GZip → Errors    │
    │                                                            │
    │  Routers (explicit registry, app.routes):                  │
    │  /health  /api/auth  /api/portfolio  /api/blogs            │
    │  /api/contact  /api/services  /api/labs  /api/estimate     │
    │  /api/admin                                                │
    │                                                            │
    │  Static: /uploads        Docs: /api-docs, /openapi.json    │
    │                                                            │
    │  Exception Handlers → {"success": false, "message": ...}   │
    └────────────────────────────────────────────────────────────┘

Lifecycle (persistent server):
    Startup:
    1. Setup logging
    2. Validate configuration (missing database URI is fatal)
    3. Connect to the database, then initialize it (tables + admin)
    4. Any failure is logged and re-raised; uvicorn exits non-zero

    Shutdown:
    1. Dispose database engine (close all pooled connections)

Lifecycle (serverless, `create_app(serverless=True)`):
    Nothing is fatal. The first request triggers one connect+initialize
    attempt (see app.serverless); on failure the app keeps serving and
    /health reports the database as disconnected.
"""

import logging
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Callable, List, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import Settings, settings
from app.database import Database
from app.exceptions import PixeloriaError, RateLimitExceededError
from app.middleware.body_limit import BodySizeLimitMiddleware
from app.middleware.cors import OriginAllowListMiddleware
from app.middleware.errors import UnhandledErrorMiddleware
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.rate_limit import RateLimitMiddleware
from app.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from app.middleware.security_headers import SecurityHeadersMiddleware
from app.migrate import initialize_database
from app.responses import INTERNAL_ERROR_MESSAGE, error_response, exception_response
from app.routes import build_router_registry
from app.serverless import DatabaseBootstrap, ServerlessBootstrapMiddleware
from app.services.file_service import FileService

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND_MESSAGE = "Route not found"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure logging once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] pixeloria.access: GET /api/blogs 200 ...

    Called by the entrypoints (lifespan, `python -m app`, serverless
    adapter) rather than at import time, so importing the app in tests
    does not reconfigure pytest's log capture.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(
        level=getattr(logging, level or settings.log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

async def start_persistent(app: FastAPI) -> None:
    """
    Validate, connect and initialize. Every failure propagates.

    Raises:
        ConfigurationError: mandatory settings missing
        DatabaseConnectionError: connect or initialize failed
    """
    app_settings: Settings = app.state.settings
    app_settings.validate_required()

    database: Database = app.state.database
    await database.connect()
    try:
        await initialize_database(database, app_settings)
    except PixeloriaError:
        await database.dispose()
        raise


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("Pixeloria Backend starting up (%s)...", app_settings.environment)

    bootstrap: Optional[DatabaseBootstrap] = getattr(app.state, "bootstrap", None)
    if bootstrap is not None:
        await bootstrap.ensure()
    else:
        try:
            await start_persistent(app)
        except PixeloriaError as e:
            logger.critical("Startup failed: %s | Context: %s", e.message, e.context)
            raise

    logger.info("Server ready at http://%s:%d", app_settings.host, app_settings.port)
    logger.info("API docs: http://%s:%d/api-docs", app_settings.host, app_settings.port)
    logger.info("=" * 60)

    yield

    logger.info("Pixeloria Backend shutting down...")
    database: Optional[Database] = app.state.database
    if database is not None:
        await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _describe_validation_error(error: dict) -> str:
    """`body.email` style location of a pydantic error, without the source prefix."""
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "header")]
    return ".".join(loc) or "request"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the terminal handlers producing the uniform error envelope.

    Handler hierarchy:
        PixeloriaError (any)       → its own status_code, its message
        RequestValidationError     → 400, first violated field named
        HTTPException 404          → 404 "Route not found"
        HTTPException (other)      → its status code and detail
        Exception (fallback)       → 500, generic message; only reached for
                                     failures inside the middleware chain,
                                     route errors are caught by
                                     UnhandledErrorMiddleware

    Security: handlers never expose stack traces, SQL or file paths in the
    response. Details are logged server-side with the request id.
    """

    @app.exception_handler(PixeloriaError)
    async def handle_application_error(request: Request, exc: PixeloriaError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)

        headers = {}
        if isinstance(exc, RateLimitExceededError):
            headers["Retry-After"] = str(exc.retry_after)
        return exception_response(exc, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        errors = [
            {"field": _describe_validation_error(err), "message": err.get("msg", "Invalid value")}
            for err in exc.errors()
        ]
        first = errors[0] if errors else {"field": "request", "message": "Invalid request"}
        logger.warning("[%s] Validation error on %s: %s", rid, first["field"], first["message"])
        return error_response(
            400,
            f"Validation error: {first['field']} - {first['message']}",
            field=first["field"],
            errors=errors,
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error_response(404, ROUTE_NOT_FOUND_MESSAGE)
        if exc.status_code == 405:
            return error_response(405, "Method not allowed", headers=exc.headers)
        return error_response(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, exc, exc_info=True)
        return error_response(500, INTERNAL_ERROR_MESSAGE)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def build_database(app_settings: Settings) -> Optional[Database]:
    """A not-yet-connected Database for the configured URI, if there is one."""
    if not app_settings.database_url:
        return None
    return Database(
        app_settings.database_url,
        pool_size=app_settings.db_pool_size,
        max_overflow=app_settings.db_max_overflow,
        pool_pre_ping=app_settings.db_pool_pre_ping,
    )


def create_app(
    app_settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    registry: Optional[List[APIRouter]] = None,
    serverless: bool = False,
    rate_limit_clock: Optional[Callable[[], float]] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings:     Defaults to the process-wide `settings`
        database:         Defaults to one built from `app_settings`
        registry:         Routers to mount; defaults to build_router_registry()
        serverless:       Lazy, non-fatal database bootstrap on first request
        rate_limit_clock: Time source for the rate limiter (tests)
    """
    app_settings = app_settings or settings
    if database is None:
        database = build_database(app_settings)

    app = FastAPI(
        title="Pixeloria API",
        description=(
            "Backend for the Pixeloria agency website and admin dashboard: "
            "portfolio, blog, services, labs, contact inquiries, newsletter, "
            "project cost estimator and user management."
        ),
        version=__version__,
        docs_url="/api-docs",
        redoc_url=None,
        openapi_url="/openapi.json",
        servers=[{"url": app_settings.public_url}] if app_settings.public_url else None,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.database = database
    app.state.started_at = time.monotonic()
    app.state.file_service = FileService(
        upload_dir=app_settings.upload_dir,
        max_size=app_settings.max_upload_size,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Starlette runs the LAST added middleware FIRST, so they are added from
    # the innermost outwards. See app.middleware for the resulting chain.
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=500)

    if serverless:
        app.state.bootstrap = DatabaseBootstrap(database, app_settings)
        app.add_middleware(ServerlessBootstrapMiddleware, bootstrap=app.state.bootstrap)

    app.add_middleware(
        RateLimitMiddleware,
        max_requests=app_settings.rate_limit_max_requests,
        window_seconds=app_settings.rate_limit_window_seconds,
        clock=rate_limit_clock or time.monotonic,
    )
    app.add_middleware(BodySizeLimitMiddleware, max_body_size=app_settings.max_body_size)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "Retry-After"],
    )
    app.add_middleware(OriginAllowListMiddleware, allowed_origins=app_settings.cors_origins_list)
    app.add_middleware(SecurityHeadersMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    for router in registry if registry is not None else build_router_registry():
        app.include_router(router)

    upload_root = Path(app_settings.upload_dir)
    upload_root.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=str(upload_root)), name="uploads")

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `app.main:app` to be importable
app = create_app()
