"""
Blog API — FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routes, and
       returns the app. The module-level `app` is what
       `uvicorn blogapi.main:app` serves.

Lifecycle:
    Startup:
    1. Initialize logging and connect to the store, unless a Database handle
       was supplied (the embedding process then owns both)
    2. Keep the handle on app.state.database

    Shutdown:
    1. Disconnect the store, if this lifespan connected it
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blogapi import __version__
from blogapi.config import Settings, settings as default_settings
from blogapi.database import Database, connect_database
from blogapi.exceptions import BlogApiError, classify_error, is_client_error
from blogapi.middleware.logging import RequestLoggingMiddleware
from blogapi.middleware.request_id import RequestIDMiddleware, request_id_var
from blogapi.routes import health, posts

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "An internal error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Connect the store on startup and release it on shutdown.

    A Database handle already present on app.state (from run_server() or a
    test fixture) is used as-is and left for its owner to disconnect.
    """
    settings: Settings = app.state.settings
    database: Optional[Database] = app.state.database
    owns_database = database is None
    if owns_database:
        # Served standalone: configure process logging
        setup_logging(settings.log_level)
    logger.info("Blog API %s starting up...", __version__)

    if owns_database:
        database = await connect_database(settings=settings)
        app.state.database = database

    logger.info("Server ready, store at %s", database.url)

    yield

    logger.info("Blog API shutting down...")
    if owns_database:
        await database.disconnect()
        app.state.database = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Every application error goes through classify_error(), so the status
    code for a given failure kind is decided in one place:
        ValidationError         → 400
        RequestValidationError  → 400 (malformed JSON body)
        NotFoundError           → 404
        DatabaseError           → 500
        anything else           → 500

    5xx responses carry a generic message; details are logged server-side.
    """

    @app.exception_handler(BlogApiError)
    async def handle_blog_api_error(request: Request, exc: BlogApiError):
        rid = request_id_var.get("")
        status_code, error_code = classify_error(exc)

        if is_client_error(exc):
            logger.warning("[%s] %s: %s", rid, error_code, exc.message)
            content = {
                "error": error_code,
                "message": exc.message,
                "details": exc.context or None,
                "request_id": rid,
            }
        else:
            logger.error(
                "[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context
            )
            content = {
                "error": error_code,
                "message": GENERIC_SERVER_ERROR,
                "request_id": rid,
            }
        return JSONResponse(status_code=status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """FastAPI could not parse the request (e.g. invalid JSON)."""
        rid = request_id_var.get("")
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        logger.warning("[%s] Malformed request: %s", rid, message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": f"Malformed request body: {message}",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        status_code, error_code = classify_error(exc)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=status_code,
            content={
                "error": error_code,
                "message": GENERIC_SERVER_ERROR,
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration (module singleton by default)
        database: An already connected store handle. When omitted, the
            lifespan connects using settings.database_url.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Blog API",
        description="Create, read, update and delete blog posts.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(posts.router)
    app.include_router(health.router)

    return app


# uvicorn expects `blogapi.main:app` to be importable
app = create_app()
