"""
EntrySync Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn entrysync.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────────────┐
    │                        FastAPI App                          │
    │                                                             │
    │  Middleware Chain:                                          │
    │  ┌───────────┐ ┌──────────┐ ┌──────────┐ ┌──────┐           │
    │  │ Open CORS │→│ Req ID   │→│ Logging  │→│ GZip │           │
    │  └───────────┘ └──────────┘ └──────────┘ └──────┘           │
    │                                                             │
    │  Routes:                                                    │
    │  ┌──────────────────┐ ┌───────────────┐ ┌──────────────┐    │
    │  │ GET/POST entries │ │ DELETE entry  │ │ POST /sync   │    │
    │  └──────────────────┘ └───────────────┘ └──────────────┘    │
    │                                                             │
    │  Exception Handlers:                                        │
    │  ┌─────────────────────────────────────────────────────┐    │
    │  │ MissingParameter→400 │ Storage→500 │ no route→404   │    │
    │  └─────────────────────────────────────────────────────┘    │
    └─────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, create the schema when AUTO_CREATE_SCHEMA is set
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from entrysync import __version__
from entrysync.config import settings
from entrysync.database import dispose_engine, init_schema
from entrysync.exceptions import EntrySyncError, MissingParameterError, StorageError
from entrysync.middleware.cors import OpenCORSMiddleware
from entrysync.middleware.logging import RequestLoggingMiddleware
from entrysync.middleware.request_id import RequestIDMiddleware, request_id_var
from entrysync.routes import entries, health, sync

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Per-statement and per-request chatter from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("EntrySync Backend %s starting up...", __version__)

    if settings.auto_create_schema:
        await init_schema()
    else:
        logger.info("Schema auto-creation disabled; expecting `alembic upgrade head`")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("EntrySync Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        MissingParameterError   → 400 {"error": "Missing appId", ...}
        StorageError            → 500 generic message, details logged
        EntrySyncError (base)   → 500
        HTTPException 404/405   → 404 plain text "Not Found"
        Exception (fallback)    → 500, rendered by OpenCORSMiddleware so the
                                  response keeps its CORS headers

    Storage details (driver error type, operation) are logged server-side
    only, never returned to the client.
    """

    @app.exception_handler(MissingParameterError)
    async def handle_missing_parameter(request: Request, exc: MissingParameterError):
        rid = request_id_var.get("")
        logger.warning("[%s] %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        rid = request_id_var.get("")
        logger.error("[%s] Storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(EntrySyncError)
    async def handle_app_error(request: Request, exc: EntrySyncError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """
        Unknown paths and unsupported methods on known paths both answer
        404 "Not Found" in plain text; other HTTP errors keep their status.
        """
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found", status_code=404)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="EntrySync API",
        description=(
            "Store, list, delete and bidirectionally sync journal entries "
            "scoped to an application identifier."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: Open CORS → Request ID → Logging → GZip
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(OpenCORSMiddleware, allow_origin=settings.cors_allow_origin)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(entries.router)
    app.include_router(sync.router)
    app.include_router(health.router)

    return app


# uvicorn expects `entrysync.main:app` to be importable
app = create_app()
