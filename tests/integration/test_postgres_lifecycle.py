"""Integration tests against a real PostgreSQL server.

Set TEST_DATABASE_URL (a postgresql:// URL to a disposable database) to run them.
"""

import os
from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest
from sqlalchemy import text

from orgmanager.core.auth.backend import PasswordHasher, TokenIssuer
from orgmanager.core.auth.service import SessionManager
from orgmanager.core.database import Base, Database, TenantStore, namespace_for
from orgmanager.core.errors import ConflictError, InvalidCredentialsError, NotFoundError
from orgmanager.modules.admins.repos import AdminRepository
from orgmanager.modules.organizations.repos import OrganizationRepository
from orgmanager.modules.organizations.services import OrganizationLifecycle


TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not TEST_DATABASE_URL, reason="TEST_DATABASE_URL is not set"),
]


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    db = Database(
        TEST_DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://"),
        pool_size=2,
        max_overflow=0,
    )
    await db.connect()
    yield db
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await db.disconnect()


@pytest.fixture
def org_name() -> str:
    return f"Acme {uuid4().hex[:8]}"


def _services(session, hasher: PasswordHasher, issuer: TokenIssuer):
    admins = AdminRepository(session)
    lifecycle = OrganizationLifecycle(
        OrganizationRepository(session), admins, TenantStore(session), hasher
    )
    return lifecycle, SessionManager(admins, hasher, issuer)


async def test_full_lifecycle(database, hasher, issuer, org_name):
    """Create, log in, update, delete across separate transactions."""
    namespace = namespace_for(org_name)

    async with database.transaction() as session:
        lifecycle, _ = _services(session, hasher, issuer)
        created = await lifecycle.create(org_name, "admin@acme.com", "Secret123")
        assert created.db_name == namespace

    async with database.transaction() as session:
        exists = await session.scalar(
            text("SELECT count(*) FROM information_schema.schemata WHERE schema_name = :ns"),
            {"ns": namespace},
        )
        assert exists == 1
        handle = TenantStore(session).resolve(org_name)
        mirror = await handle.get_user_by_email("admin@acme.com")
        assert mirror is not None

    async with database.transaction() as session:
        _, sessions = _services(session, hasher, issuer)
        login = await sessions.login("admin@acme.com", "Secret123")
        assert issuer.verify_access(login.access_token).organization_name == org_name

    async with database.transaction() as session:
        lifecycle, _ = _services(session, hasher, issuer)
        await lifecycle.update(org_name, "admin@acme.com", "Changed456")

    async with database.transaction() as session:
        _, sessions = _services(session, hasher, issuer)
        with pytest.raises(InvalidCredentialsError):
            await sessions.login("admin@acme.com", "Secret123")

    async with database.transaction() as session:
        lifecycle, _ = _services(session, hasher, issuer)
        await lifecycle.delete(org_name)

    async with database.transaction() as session:
        lifecycle, _ = _services(session, hasher, issuer)
        with pytest.raises(NotFoundError):
            await lifecycle.get(org_name)
        exists = await session.scalar(
            text("SELECT count(*) FROM information_schema.schemata WHERE schema_name = :ns"),
            {"ns": namespace},
        )
        assert exists == 0


async def test_failed_create_leaves_nothing_behind(database, hasher, issuer, org_name):
    """A conflict rolls back the whole request, namespace included."""
    async with database.transaction() as session:
        lifecycle, _ = _services(session, hasher, issuer)
        await lifecycle.create(org_name, "first@acme.com", "Secret123")

    other = f"{org_name} two"
    with pytest.raises(ConflictError):
        async with database.transaction() as session:
            lifecycle, _ = _services(session, hasher, issuer)
            await lifecycle.create(other, "first@acme.com", "Secret123")

    async with database.transaction() as session:
        lifecycle, _ = _services(session, hasher, issuer)
        with pytest.raises(NotFoundError):
            await lifecycle.get(other)
        await lifecycle.delete(org_name)


async def _user_count(session, namespace: str) -> int:
    return await session.scalar(text(f'SELECT count(*) FROM "{namespace}".users'))


async def test_namespace_variant_conflict_keeps_first_tenant(database, hasher, issuer, org_name):
    """A case or spacing variant of an existing name conflicts before touching its schema."""
    namespace = namespace_for(org_name)
    async with database.transaction() as session:
        lifecycle, _ = _services(session, hasher, issuer)
        await lifecycle.create(org_name, "first@acme.com", "Secret123")

    variant = org_name.upper().replace(" ", "  ")
    with pytest.raises(ConflictError) as exc_info:
        async with database.transaction() as session:
            lifecycle, _ = _services(session, hasher, issuer)
            await lifecycle.create(variant, "second@acme.com", "Secret123")

    assert exc_info.value.error_code == "namespace_exists"
    async with database.transaction() as session:
        assert await _user_count(session, namespace) == 1
        lifecycle, _ = _services(session, hasher, issuer)
        await lifecycle.delete(org_name)


async def test_long_names_get_separate_schemas(database, hasher, issuer):
    base = f"Northwind {uuid4().hex[:8]} International Holdings Group Subsidiary Operations"
    names = [f"{base} East", f"{base} West"]

    async with database.transaction() as session:
        lifecycle, _ = _services(session, hasher, issuer)
        created = [
            await lifecycle.create(name, f"{uuid4().hex[:8]}@northwind.com", "Secret123")
            for name in names
        ]

    namespaces = [c.db_name for c in created]
    assert namespaces[0] != namespaces[1]
    async with database.transaction() as session:
        for namespace in namespaces:
            assert await _user_count(session, namespace) == 1
        lifecycle, _ = _services(session, hasher, issuer)
        for name in names:
            await lifecycle.delete(name)
