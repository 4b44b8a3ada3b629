"""FastAPI application factory.

Creates and configures the FastAPI application with all routers,
middleware, and exception handlers.

API Versioning:
    All API endpoints are versioned under /api/v1/ prefix.
    The health check endpoint remains unversioned at /health.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from atelier.application.ports import ImageStorage
from atelier.infrastructure.persistence.sqlalchemy import Database
from atelier.infrastructure.storage import CloudinaryImageStorage
from atelier.presentation.api.exception_handlers import setup_exception_handlers
from atelier.presentation.api.routers import (
    admin_router,
    auth_router,
    clients_router,
    styles_router,
)
from atelier_config.settings import Settings, get_settings

# Third-party loggers that are too chatty at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite", "cloudinary")


def _configure_logging(level_name: str) -> None:
    """Configure application logging.

    Console output with timestamps and module names. The level applies to
    the atelier packages; noisy third-party libraries stay at WARNING.
    """
    log_level = getattr(logging, level_name.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )

    for name in ("atelier", "atelier_auth", "atelier_config"):
        logging.getLogger(name).setLevel(log_level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


logger = logging.getLogger(__name__)

# API version info
API_VERSION = "1.0.0"
API_V1_PREFIX = "/api/v1"

# OpenAPI tags metadata for documentation
OPENAPI_TAGS = [
    {
        "name": "Authentication",
        "description": """User authentication and session management.

**Registration & Login:**
- Register with name, email and password
- Login to obtain an access token (15 minutes)
- Sign in with Google

**Tokens:**
- The access token goes into the `Authorization: Bearer` header
- The refresh token lives in an HttpOnly cookie and is rotated on every refresh
""",
    },
    {
        "name": "Clients",
        "description": """Customer records.

- Contact details and event type
- Free-form body measurements (name/value pairs)
- Linked styles from the style library
""",
    },
    {
        "name": "Styles",
        "description": """Style library with hosted images.

**Categories:** Traditional, Wedding, Casual, Corporate, Evening Wear, Other

Create and update accept `multipart/form-data` with the image in the
`styleImage` field.
""",
    },
    {
        "name": "Admin",
        "description": "Dashboard statistics and user overview (admin only).",
    },
    {
        "name": "Health",
        "description": "Service health monitoring endpoints.",
    },
    {
        "name": "Info",
        "description": "API information and discovery.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    database: Database = app.state.database

    # Startup
    logger.info("Starting Atelier API v%s...", API_VERSION)
    logger.info("Initializing database schema...")
    try:
        await database.create_schema()
    except ConnectionRefusedError:
        logger.critical("Could not connect to the database.")
        raise SystemExit(1) from None
    logger.info("Database schema initialized successfully")
    yield

    # Shutdown
    logger.info("Shutting down Atelier API...")
    await database.dispose()
    logger.info("Database connections closed")


def _create_image_storage(settings: Settings) -> ImageStorage | None:
    if not settings.cloudinary_configured:
        logger.warning("Cloudinary is not configured, style uploads will fail")
        return None
    return CloudinaryImageStorage(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret.get_secret_value(),
        timeout=settings.cloudinary_timeout_seconds,
    )


def create_v1_router() -> APIRouter:
    """Create the v1 API router with all endpoints.

    Returns
    -------
    APIRouter with all v1 endpoints mounted.
    """
    v1_router = APIRouter()

    v1_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    v1_router.include_router(clients_router, prefix="/clients", tags=["Clients"])
    v1_router.include_router(styles_router, prefix="/styles", tags=["Styles"])
    v1_router.include_router(admin_router, prefix="/admin", tags=["Admin"])

    return v1_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Optional settings override for testing.

    Returns
    -------
    Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    _configure_logging(settings.log_level)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description=(
            "Backend for a fashion business: **clients** with measurements, "
            "a **style library** with hosted images, and **JWT** authentication."
        ),
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )

    # Per-application state, read by the dependencies
    app.state.settings = settings
    app.state.database = Database(settings.database_url)
    app.state.image_storage = _create_image_storage(settings)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Consistent error envelope for every failure
    setup_exception_handlers(app, debug=settings.is_development)

    # Include versioned API router
    app.include_router(create_v1_router(), prefix=API_V1_PREFIX)

    # Health check endpoint (unversioned - always accessible)
    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Health check endpoint.

        Unversioned for load balancer/monitoring compatibility.
        """
        return {
            "status": "healthy",
            "version": API_VERSION,
            "api_versions": ["v1"],
        }

    # Root endpoint with API info
    @app.get("/", tags=["Info"])
    async def root() -> dict:
        """API root endpoint with version information."""
        return {
            "name": f"{settings.app_name} API",
            "version": API_VERSION,
            "docs": "/docs" if settings.api_debug else None,
            "api_base": API_V1_PREFIX,
            "endpoints": {
                "health": "/health",
                "auth": f"{API_V1_PREFIX}/auth",
                "clients": f"{API_V1_PREFIX}/clients",
                "styles": f"{API_V1_PREFIX}/styles",
                "admin": f"{API_V1_PREFIX}/admin",
            },
        }

    return app
