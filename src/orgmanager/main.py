"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orgmanager import __version__
from orgmanager.api.router import api_router
from orgmanager.config import Settings, get_settings
from orgmanager.core.auth.backend import PasswordHasher, TokenIssuer
from orgmanager.core.auth.middleware import PrincipalContextMiddleware, RequestIdMiddleware
from orgmanager.core.database import Database
from orgmanager.core.errors import register_exception_handlers
from orgmanager.core.logging import RequestLoggingMiddleware, configure_logging

# Registry models must be imported before Database.connect() creates tables
from orgmanager.modules.admins.models import AdminUser  # noqa: F401
from orgmanager.modules.organizations.models import Organization  # noqa: F401


logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Connect the database on startup and disconnect on shutdown."""
    settings: Settings = app.state.settings
    database: Database = app.state.database

    logger.info(
        "application_startup",
        app_name=settings.app_name,
        environment=settings.environment,
    )
    await database.connect()

    yield

    logger.info("application_shutdown")
    await database.disconnect()


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; read from the environment when omitted
        database: Database to use; built from settings when omitted

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant organization management with per-tenant namespaces",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
    )

    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_issuer = TokenIssuer.from_settings(settings)

    cors_origins = settings.cors_origins
    if settings.is_development and not cors_origins:
        cors_origins = ["http://localhost:3000", "http://localhost:5173"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    # Added last runs first: request ID, then principal context, then logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(PrincipalContextMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router)

    return app
