"""
Fauna API: FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn fauna_api.main:app) or the `fauna-api` script.
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌─────────┐ ┌─────────┐  │
    │  │  Req ID  │→│ Deadline │→│ Logging │→│  CORS   │  │
    │  └──────────┘ └──────────┘ └─────────┘ └─────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  /api/animals  /api/species  /api/categories        │
    │  /health                                            │
    │                                                     │
    │  Exception Handlers:                                │
    │  ValidationError→400 │ NotFound→404 │ DB/other→500  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Build the MongoDB client and select the database
    4. Ping the server and ensure indexes

    Shutdown:
    1. Close the MongoDB client
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

from fauna_api import __version__
from fauna_api.config import settings
from fauna_api.database import close_client, create_client, ensure_indexes, ping
from fauna_api.exceptions import (
    DatabaseError,
    FaunaAPIError,
    NotFoundError,
    ValidationError,
)
from fauna_api.middleware.deadline import RequestDeadlineMiddleware
from fauna_api.middleware.logging import RequestLoggingMiddleware
from fauna_api.middleware.request_id import RequestIDMiddleware, request_id_var
from fauna_api.routes import animals, categories, health, species

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal Server Error"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (container runtimes capture it)
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Access lines come from RequestLoggingMiddleware instead
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Connect the document store on startup and release it on shutdown.

    The client and database handle live on app.state; handlers reach them
    only through Depends(get_database). An unreachable server is logged and
    the app still starts, so /health can report it.
    """
    setup_logging()
    logger.info("Fauna API %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    client = create_client(settings)
    app.state.mongo_client = client
    app.state.db = client[settings.mongodb_database]

    if await ping(client):
        logger.info("Connected to MongoDB database '%s'", settings.mongodb_database)
        if settings.mongodb_create_indexes:
            await ensure_indexes(app.state.db)
    else:
        logger.error("MongoDB is unreachable; requests will fail until it recovers")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Fauna API shutting down...")
    await close_client(client)
    app.state.db = None
    app.state.mongo_client = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(status_code: int, message: str) -> JSONResponse:
    """The one error body shape of the API: {"error": "<message>"}."""
    return JSONResponse(status_code=status_code, content={"error": message})


def describe_request_error(exc: RequestValidationError) -> str:
    """Short client-facing summary of FastAPI's request validation failure."""
    for err in exc.errors():
        loc = err.get("loc") or ()
        if not loc:
            continue
        if loc[0] == "body":
            return "Failed to parse request body"
        if loc[0] in ("query", "path") and len(loc) > 1:
            return f"Invalid {loc[0]} parameter '{loc[-1]}'"
    return "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and `{"error": ...}` bodies.

    Handler hierarchy:
        ValidationError          → 400 Bad Request
        RequestValidationError   → 400 Bad Request (body / query parsing)
        NotFoundError            → 404 Not Found
        DatabaseError            → 500 Internal Server Error
        FaunaAPIError (base)     → 500 Internal Server Error
        Exception (fallback)     → 500 Internal Server Error

    500 responses never carry driver details; those go to the log with the
    request ID.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        message = describe_request_error(exc)
        logger.warning("[%s] Request validation error: %s | %s", rid, message, exc.errors())
        return error_response(400, message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(500, INTERNAL_ERROR)

    @app.exception_handler(FaunaAPIError)
    async def handle_application_error(request: Request, exc: FaunaAPIError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return error_response(500, INTERNAL_ERROR)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_response(500, INTERNAL_ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    No network activity happens here; the store is connected by the lifespan.
    """
    app = FastAPI(
        title="Fauna API",
        description=(
            "CRUD REST API for animals, species and categories backed by MongoDB, "
            "with filtering, sorting, pagination and species/category joins."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → Deadline → Logging → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestDeadlineMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(animals.router)
    app.include_router(species.router)
    app.include_router(categories.router)
    app.include_router(health.router)

    return app


# uvicorn expects `fauna_api.main:app` to be importable
app = create_app()


def run() -> None:
    """Console entry point: serve the app on BACKEND_HOST:PORT."""
    import uvicorn

    uvicorn.run(
        "fauna_api.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
