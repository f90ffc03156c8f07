"""
AssetVault Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware, routing, error translation
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
       Collaborators (Settings, Database, TokenService) can be injected, which
       is how tests point the app at a throwaway SQLite file.
Who:   Called by uvicorn to start the server (uvicorn assetvault.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────────┐ ┌─────────────────┐  │
    │  │  Req ID  │→│   Logging    │→│      CORS       │  │
    │  └──────────┘ └──────────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────┐ ┌──────────────┐ ┌─────────┐  │
    │  │ /register /login │ │ /api/v1/...  │ │ /health │  │
    │  └──────────────────┘ └──────────────┘ └─────────┘  │
    │                          ▲ bearer token             │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ AssetVaultError→4xx │ Unauth→401 │ else→500  │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate security settings (logged, not fatal)
    3. Probe the database with bounded retries (fatal on failure)
    4. Optionally create tables (DB_CREATE_SCHEMA)

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from assetvault import __version__
from assetvault.config import Settings
from assetvault.config import settings as default_settings
from assetvault.database import Database
from assetvault.exceptions import (
    AssetVaultError,
    StoreError,
    UnauthenticatedError,
    ValidationError,
)
from assetvault.middleware.logging import RequestLoggingMiddleware
from assetvault.middleware.request_id import RequestIDMiddleware, request_id_var
from assetvault.routes import assets, auth, health
from assetvault.services.auth_service import TokenService
from assetvault.services.validation import ROOT_FIELD

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure logging for the entire application.

    When:    Called once at the top of the lifespan, before anything logs.
    Format:  %(asctime)s [%(levelname)s] %(name)s: %(message)s
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

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Run startup checks, then clean up on shutdown.

    A database that stays unreachable for every retry aborts startup: the
    StoreError propagates out of the lifespan and uvicorn exits instead of
    serving requests that could never succeed.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings)
    logger.info("=" * 60)
    logger.info("AssetVault Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    try:
        await database.verify_connection(
            attempts=settings.db_connect_attempts,
            wait=settings.db_connect_wait,
        )
    except StoreError as e:
        logger.critical("Startup aborted: %s | Context: %s", e.message, e.context)
        raise

    if settings.db_create_schema:
        await database.create_schema()
        logger.info("Database schema ensured")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("AssetVault Backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        body["details"] = details
    return body


def _request_violations(exc: RequestValidationError) -> List[Dict[str, str]]:
    violations = []
    for error in exc.errors():
        # Drop the leading "body" segment FastAPI adds to every location
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        violations.append({
            "field": ".".join(loc) or ROOT_FIELD,
            "reason": error.get("msg", "Invalid request"),
            "kind": error.get("type", "invalid"),
        })
    return violations


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy (most specific wins):
        ValidationError         → 400, violations in details
        UnauthenticatedError    → 401 + WWW-Authenticate: Bearer
        StoreError              → 400, generic message (driver error logged only)
        AssetVaultError (base)  → exc.status_code / exc.error_code
        RequestValidationError  → 400 validation_error (unparseable or missing body)
        Exception (fallback)    → 500 internal_server_error

    Security: responses never contain stack traces, SQL, or password material.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s (%d violation(s))", rid, exc.message, len(exc.violations))
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message, {"violations": exc.violations}),
        )

    @app.exception_handler(UnauthenticatedError)
    async def handle_unauthenticated(request: Request, exc: UnauthenticatedError):
        rid = request_id_var.get("")
        logger.info("[%s] Unauthenticated: %s", rid, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        rid = request_id_var.get("")
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, "A storage error occurred. Please try again later."),
        )

    @app.exception_handler(AssetVaultError)
    async def handle_app_error(request: Request, exc: AssetVaultError):
        rid = request_id_var.get("")
        logger.warning("[%s] %s: %s", rid, exc.error_code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        violations = _request_violations(exc)
        logger.warning("[%s] Malformed request: %d violation(s)", rid, len(violations))
        return JSONResponse(
            status_code=400,
            content=_error_body(
                ValidationError.error_code,
                "Request body failed validation",
                {"violations": violations},
            ),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
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
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    token_service: Optional[TokenService] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings:      Defaults to the environment-backed singleton
        database:      Defaults to a Database built from `settings`
        token_service: Defaults to a TokenService built from `settings`

    The collaborators live on `app.state` and are reached by the
    dependencies in assetvault.dependencies; nothing is module-global.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="AssetVault API",
        description=(
            "Authenticated catalogue of game-development assets: plugins, "
            "3D/2D art, SFX and VFX, with partial updates over nested fields."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)
    app.state.token_service = token_service or TokenService.from_settings(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → CORS
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentialed requests against a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "WWW-Authenticate"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(assets.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
