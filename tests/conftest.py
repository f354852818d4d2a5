"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from orgmanager.config import Settings
from orgmanager.core.auth.backend import PasswordHasher, TokenIssuer
from orgmanager.core.auth.dependencies import get_session_manager
from orgmanager.core.auth.service import SessionManager
from orgmanager.main import create_app
from orgmanager.modules.organizations.dependencies import get_organization_lifecycle
from orgmanager.modules.organizations.services import OrganizationLifecycle
from tests.fakes import (
    FakeAdminRepository,
    FakeDatabase,
    FakeOrganizationRepository,
    FakeTenantStore,
)


TEST_SECRET_KEY = "test-secret-key-that-is-at-least-32-characters-long"


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        secret_key=TEST_SECRET_KEY,
        environment="testing",
        bcrypt_rounds=4,
    )


@pytest.fixture
def hasher(settings: Settings) -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


@pytest.fixture
def issuer(settings: Settings) -> TokenIssuer:
    return TokenIssuer.from_settings(settings)


@pytest.fixture
def admins() -> FakeAdminRepository:
    return FakeAdminRepository()


@pytest.fixture
def organizations() -> FakeOrganizationRepository:
    return FakeOrganizationRepository()


@pytest.fixture
def tenants() -> FakeTenantStore:
    return FakeTenantStore()


@pytest.fixture
def lifecycle(organizations, admins, tenants, hasher) -> OrganizationLifecycle:
    return OrganizationLifecycle(organizations, admins, tenants, hasher)


@pytest.fixture
def sessions(admins, hasher, issuer) -> SessionManager:
    return SessionManager(admins, hasher, issuer)


@pytest.fixture
def database() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def app(settings, database, lifecycle, sessions) -> FastAPI:
    """Application whose services run against the in-memory fakes."""
    app = create_app(settings=settings, database=database)
    app.dependency_overrides[get_organization_lifecycle] = lambda: lifecycle
    app.dependency_overrides[get_session_manager] = lambda: sessions
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
