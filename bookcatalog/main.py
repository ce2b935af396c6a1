"""
Book Catalog API: FastAPI Application Factory
=============================================

What:  Builds the FastAPI application and owns the process lifecycle.
Who:   uvicorn (`uvicorn bookcatalog.main:app`) or the `book-catalog`
       console script, which calls `run()`.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:      /api/books   /api/books/{id}  /health │
    │                                                     │
    │  Exception Handlers:                                │
    │    MissingFieldError  → 200 text                    │
    │    BookNotFoundError  → 200 text                    │
    │    DatabaseError      → 500 {"error": ...}          │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Validate configuration (logged, never fatal)
    3. Connect to MongoDB and bind a BookService to app.state

    Shutdown:
    1. Close the MongoDB client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from bookcatalog import __version__
from bookcatalog.config import settings
from bookcatalog.database import MongoConnection
from bookcatalog.exceptions import (
    BookNotFoundError,
    DatabaseError,
    MissingFieldError,
)
from bookcatalog.middleware.logging import RequestLoggingMiddleware
from bookcatalog.middleware.request_id import RequestIDMiddleware, request_id_var
from bookcatalog.routes import books, health
from bookcatalog.services.book_service import BookService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, before anything else logs.

    Format: 2024-01-15T12:00:00 [INFO] bookcatalog.services.book_service: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our own access log replaces uvicorn's; the driver is chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Connect the store before serving and release it on shutdown.

    A failed connection does not stop the server: the BookService is bound
    to no collection, listing answers "Database not connected" and the
    single-book routes answer "no book exists".
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Book Catalog API v%s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    mongo = MongoConnection(settings)
    collection = await mongo.connect()
    app.state.mongo = mongo
    app.state.book_service = BookService(collection)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Book Catalog API shutting down...")
    await mongo.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map BookService exceptions raised by the collection-level routes.

    Client-input errors answer in plain text with 200; store errors answer
    with a JSON `error` and 500. Driver details are logged, never returned.
    """

    @app.exception_handler(MissingFieldError)
    async def handle_missing_field(request: Request, exc: MissingFieldError):
        return PlainTextResponse(exc.message)

    @app.exception_handler(BookNotFoundError)
    async def handle_not_found(request: Request, exc: BookNotFoundError):
        return PlainTextResponse(exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble middleware, exception handlers and routers."""
    app = FastAPI(
        title="Personal Library API",
        description=(
            "Create, list and delete books, and attach comments to them. "
            "Backed by MongoDB."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Last added runs first: Request ID → Logging → CORS
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

    app.include_router(books.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Entry point of the `book-catalog` console script."""
    uvicorn.run(
        "bookcatalog.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
