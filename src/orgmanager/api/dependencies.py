"""Shared API dependencies.

Process-wide collaborators (settings, database, hasher, token issuer) are
created by the application factory and stored on ``app.state``; these
dependencies hand them to request handlers.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from orgmanager.config import Settings
from orgmanager.core.auth.backend import PasswordHasher, TokenIssuer
from orgmanager.core.database import Database, TenantStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


AppSettings = Annotated[Settings, Depends(get_app_settings)]
AppDatabase = Annotated[Database, Depends(get_database)]
Hasher = Annotated[PasswordHasher, Depends(get_password_hasher)]
Issuer = Annotated[TokenIssuer, Depends(get_token_issuer)]


async def get_db(database: AppDatabase) -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a request-scoped database session.

    The session commits when the handler returns and rolls back if it raises.
    """
    async with database.transaction() as session:
        yield session


# Type alias for database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]


def get_tenant_store(db: DBSession, settings: AppSettings) -> TenantStore:
    return TenantStore(db, prefix=settings.tenant_namespace_prefix)


Tenants = Annotated[TenantStore, Depends(get_tenant_store)]
