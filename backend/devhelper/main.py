"""
DevHelper Backend — FastAPI Application Factory
=================================================

What:  Builds and configures the FastAPI application.
How:   create_app() wires settings, the Database handle, the text generator,
       middleware, exception handlers and routers. Collaborators can be
       injected, which is how the tests swap in SQLite and a mock generator.
Who:   uvicorn devhelper.main:app

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: Request ID + access log → GZip →       │
    │              Signed session cookie                  │
    │                                                     │
    │  Routes: pages │ auth │ snippets │ generate │ health│
    │                                                     │
    │  Exception handlers (plain text bodies):            │
    │    Validation/Conflict/Credentials → 400            │
    │    Unauthenticated → 303 /login or 401              │
    │    NotFound → 404   Database/Session/Generation→500 │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config check → open store → purge expired sessions
    Shutdown: dispose store connections
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from devhelper import __version__
from devhelper.config import Settings, settings as default_settings
from devhelper.database import Database
from devhelper.exceptions import (
    ConflictError,
    DatabaseError,
    DevHelperError,
    GenerationError,
    InvalidCredentialsError,
    NotFoundError,
    SessionError,
    UnauthenticatedError,
    ValidationError,
)
from devhelper.middleware.access import AccessLogMiddleware, request_id_var
from devhelper.routes import auth, generate, health, pages, snippets
from devhelper.services.llm_base import TextGenerator
from devhelper.services.session_service import session_service
from devhelper.templating import STATIC_DIR, redirect

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure the root logger once, at startup, before anything else logs.

    Format: 2024-01-15T12:00:00 [INFO] devhelper.access: GET /snippets 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("DevHelper %s starting up...", __version__)

    # Report misconfiguration but keep serving; /health shows what is broken
    try:
        config.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    database.open()
    try:
        async with database.session() as db:
            purged = await session_service.purge_expired(db)
        if purged:
            logger.info("Purged %d expired sessions", purged)
    except Exception as e:
        logger.warning("Could not purge expired sessions: %s", str(e))

    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("DevHelper shutting down...")
    await database.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _plain(status_code: int, message: str) -> PlainTextResponse:
    return PlainTextResponse(message, status_code=status_code)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to responses.

    Bodies are the exception's short message as plain text. Context dicts
    and stack traces go to the log only.

        ValidationError, ConflictError,
        InvalidCredentialsError      → 400
        UnauthenticatedError         → 303 /login (pages) or 401 (actions)
        NotFoundError                → 404
        DatabaseError, SessionError,
        GenerationError              → 500
        Exception (fallback)         → 500 generic message
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _plain(400, exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.info("[%s] Conflict: %s", request_id_var.get(""), exc.message)
        return _plain(400, exc.message)

    @app.exception_handler(InvalidCredentialsError)
    async def handle_invalid_credentials(request: Request, exc: InvalidCredentialsError):
        # reason (unknown user vs bad password) is logged, never returned
        logger.info(
            "[%s] Login failed: %s", request_id_var.get(""), exc.context.get("reason")
        )
        return _plain(400, exc.message)

    @app.exception_handler(UnauthenticatedError)
    async def handle_unauthenticated(request: Request, exc: UnauthenticatedError):
        if exc.redirect:
            return redirect("/login")
        return _plain(401, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        logger.info("[%s] Not found: %s", request_id_var.get(""), exc.context)
        return _plain(404, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _plain(500, exc.message)

    @app.exception_handler(SessionError)
    async def handle_session_error(request: Request, exc: SessionError):
        logger.error("[%s] Session error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _plain(500, exc.message)

    @app.exception_handler(GenerationError)
    async def handle_generation_error(request: Request, exc: GenerationError):
        logger.error("[%s] Generation error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _plain(500, exc.message)

    @app.exception_handler(DevHelperError)
    async def handle_app_error(request: Request, exc: DevHelperError):
        logger.error("[%s] Application error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _plain(500, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _plain(500, "An unexpected error occurred. Please try again.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    config: Optional[Settings] = None,
    database: Optional[Database] = None,
    generator: Optional[TextGenerator] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config:    Settings to use (default: environment-loaded settings)
        database:  Store handle (default: Database(config)); opened by the
                   lifespan, or by the caller when lifespan does not run
        generator: Text generator (default: GeminiService(config))
    """
    config = config or default_settings

    if generator is None:
        from devhelper.services.gemini_service import GeminiService
        generator = GeminiService(config)

    app = FastAPI(
        title="DevHelper",
        description="Store, tag, browse, edit and AI-generate code snippets.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.database = database or Database(config)
    app.state.generator = generator

    # ── Middleware ────────────────────────────────────────────────────────
    # Last added runs first: access log → GZip → Session
    app.add_middleware(
        SessionMiddleware,
        secret_key=config.session_secret,
        session_cookie=config.session_cookie,
        max_age=config.session_max_age,
        same_site="lax",
        https_only=config.session_https_only,
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(AccessLogMiddleware)

    register_exception_handlers(app)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    app.include_router(pages.router)
    app.include_router(auth.router)
    app.include_router(snippets.router)
    app.include_router(generate.router)
    app.include_router(health.router)

    return app


app = create_app()
