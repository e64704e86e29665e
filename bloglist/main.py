"""
Bloglist Backend: FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn bloglist.main:app) and by the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │  Req ID  │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  GET/POST /api/blogs   DELETE /api/blogs/{id}       │
    │  GET /health                                        │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ MalformedId→400 │ Persistence→500 │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config validation → optional table creation
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bloglist import __version__
from bloglist.config import Settings, settings
from bloglist.database import Database
from bloglist.exceptions import (
    BloglistError,
    MalformedIdentifierError,
    PersistenceError,
    ValidationError,
)
from bloglist.middleware.logging import RequestLoggingMiddleware
from bloglist.middleware.request_id import RequestIDMiddleware, request_id_var
from bloglist.routes import blogs, health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(config: Settings = settings) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Third-party libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Run initialization on startup and release the database on shutdown."""
    config: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config)
    logger.info("Bloglist backend starting up (version %s)", __version__)

    try:
        config.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health reports the database state
        logger.error("Configuration error: %s", str(e))

    if config.db_create_tables:
        await database.create_all()

    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Bloglist backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the ErrorResponse format.

    Handler hierarchy:
        ValidationError           → 400 validation_error
        RequestValidationError    → 400 validation_error (undecodable body / wrong type)
        MalformedIdentifierError  → 400 malformatted_id
        HTTPException             → its own status (404 → unknown_endpoint)
        PersistenceError          → 500 server_error (generic message)
        BloglistError (base)      → 500 server_error
        Exception (fallback)      → 500 internal_server_error

    Responses never include stack traces or SQL; those are logged server-side.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        logger.warning("[%s] Request could not be decoded: %s", request_id_var.get(""), exc.errors())
        return JSONResponse(
            status_code=400,
            content=_error_body(
                "validation_error",
                "Request body is not a valid blog",
                {"errors": jsonable_encoder(exc.errors())},
            ),
        )

    @app.exception_handler(MalformedIdentifierError)
    async def handle_malformed_id(request: Request, exc: MalformedIdentifierError):
        logger.warning("[%s] Malformed id: %s", request_id_var.get(""), exc.identifier)
        return JSONResponse(
            status_code=400,
            content=_error_body("malformatted_id", exc.message, exc.context),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            content = _error_body("unknown_endpoint", "unknown endpoint")
        else:
            content = _error_body("http_error", str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(PersistenceError)
    async def handle_persistence_error(request: Request, exc: PersistenceError):
        logger.error(
            "[%s] Persistence error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error",
                "An internal error occurred. Please try again later.",
            ),
        )

    @app.exception_handler(BloglistError)
    async def handle_bloglist_error(request: Request, exc: BloglistError):
        logger.error("[%s] Application error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    database: Optional[Database] = None,
    config: Settings = settings,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Storage handle to serve from. Defaults to one built from
                  config.database_url; tests pass an in-memory SQLite handle.
        config:   Settings instance

    Returns:
        Fully configured FastAPI instance.
    """
    app = FastAPI(
        title="Bloglist API",
        description="List, create and delete blog entries.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.database = database or Database(config=config)

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(blogs.router)
    app.include_router(health.router)

    return app


# uvicorn expects `bloglist.main:app` to be importable
app = create_app()
