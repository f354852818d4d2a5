"""Per-organization tenant namespaces.

Each organization owns a PostgreSQL schema named after it. The schema
holds a ``users`` table mirroring the organization admin's credentials.
Schemas are created and dropped with SQLAlchemy DDL constructs on the
request's session, so they share its transaction.
"""

import hashlib
import re
from functools import lru_cache
from typing import Any
from uuid import UUID, uuid4

import structlog
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    Uuid,
    func,
    insert,
    select,
    update,
)
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.schema import CreateSchema, CreateTable, DropSchema

from orgmanager.core.constants import (
    DEFAULT_NAMESPACE_PREFIX,
    MAX_EMAIL_LENGTH,
    MAX_NAMESPACE_BYTES,
    MAX_ROLE_LENGTH,
    NAMESPACE_DIGEST_LENGTH,
    ROLE_ORG_ADMIN,
    TENANT_USERS_TABLE,
)


logger = structlog.get_logger()

_WHITESPACE = re.compile(r"\s+")


def namespace_for(org_name: str, prefix: str = DEFAULT_NAMESPACE_PREFIX) -> str:
    """Derive the tenant namespace identifier for an organization name.

    Lowercases the name, collapses each whitespace run into a single
    underscore and adds the prefix. Names differing only in case or
    whitespace map to the same namespace.

    PostgreSQL truncates identifiers at 63 bytes, so a longer result is
    cut down and suffixed with a digest of the full form. The returned
    string is always the exact schema name.

    Examples:
        >>> namespace_for("Acme Inc")
        'org_acme_inc'
        >>> namespace_for("Big   Data\\tCo")
        'org_big_data_co'
    """
    namespace = f"{prefix}{_WHITESPACE.sub('_', org_name.lower())}"
    encoded = namespace.encode()
    if len(encoded) <= MAX_NAMESPACE_BYTES:
        return namespace

    digest = hashlib.sha256(encoded).hexdigest()[:NAMESPACE_DIGEST_LENGTH]
    head = encoded[: MAX_NAMESPACE_BYTES - NAMESPACE_DIGEST_LENGTH - 1]
    return f"{head.decode(errors='ignore')}_{digest}"


@lru_cache(maxsize=1024)
def tenant_users_table(namespace: str) -> Table:
    """Build the users table bound to a tenant schema."""
    return Table(
        TENANT_USERS_TABLE,
        MetaData(schema=namespace),
        Column("id", Uuid, primary_key=True, default=uuid4),
        Column("email", String(MAX_EMAIL_LENGTH), nullable=False),
        Column("password_hash", Text, nullable=False),
        Column("role", String(MAX_ROLE_LENGTH), nullable=False, default=ROLE_ORG_ADMIN),
        Column("is_active", Boolean, nullable=False, default=True),
        Column(
            "created_at",
            DateTime(timezone=True),
            server_default=func.now(),
            nullable=False,
        ),
        Column(
            "updated_at",
            DateTime(timezone=True),
            server_default=func.now(),
            nullable=False,
        ),
        UniqueConstraint("email", name="uq_users_email"),
    )


class TenantHandle:
    """Access to one tenant namespace through the request's session."""

    def __init__(self, session: AsyncSession, namespace: str) -> None:
        self.session = session
        self.namespace = namespace
        self.users = tenant_users_table(namespace)

    async def add_user(
        self,
        email: str,
        password_hash: str,
        role: str = ROLE_ORG_ADMIN,
    ) -> UUID:
        """Insert a tenant-local user and return its id."""
        user_id = uuid4()
        await self.session.execute(
            insert(self.users).values(
                id=user_id,
                email=email,
                password_hash=password_hash,
                role=role,
                is_active=True,
            )
        )
        return user_id

    async def update_credentials(
        self,
        email: str,
        password_hash: str,
        role: str = ROLE_ORG_ADMIN,
    ) -> int:
        """Overwrite the email and password hash of the users holding ``role``.

        Returns:
            Number of rows updated
        """
        result = await self.session.execute(
            update(self.users)
            .where(self.users.c.role == role)
            .values(email=email, password_hash=password_hash, updated_at=func.now())
        )
        return int(result.rowcount or 0)  # type: ignore[attr-defined]

    async def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        result = await self.session.execute(
            select(self.users).where(self.users.c.email == email)
        )
        row = result.mappings().one_or_none()
        return dict(row) if row is not None else None


class TenantStore:
    """Creates, resolves and drops tenant namespaces.

    ``create`` does not check whether the organization already exists;
    callers check the registry first.
    """

    def __init__(
        self,
        session: AsyncSession,
        prefix: str = DEFAULT_NAMESPACE_PREFIX,
    ) -> None:
        self.session = session
        self.prefix = prefix

    def namespace_for(self, org_name: str) -> str:
        return namespace_for(org_name, self.prefix)

    async def create(self, org_name: str) -> TenantHandle:
        """Provision the namespace and its users table.

        Args:
            org_name: The organization name

        Returns:
            Handle to the new namespace
        """
        namespace = self.namespace_for(org_name)
        await self.session.execute(CreateSchema(namespace, if_not_exists=True))
        await self.session.execute(
            CreateTable(tenant_users_table(namespace), if_not_exists=True)
        )
        logger.info("tenant_namespace_created", namespace=namespace)
        return TenantHandle(self.session, namespace)

    def resolve(self, org_name: str) -> TenantHandle:
        """Return a handle without touching the store.

        The namespace may or may not exist; consumers find out on first use.
        """
        return TenantHandle(self.session, self.namespace_for(org_name))

    async def drop(self, org_name: str) -> str:
        """Irreversibly drop the namespace and everything in it.

        Returns:
            The dropped namespace identifier
        """
        namespace = self.namespace_for(org_name)
        await self.session.execute(DropSchema(namespace, cascade=True, if_exists=True))
        tenant_users_table.cache_clear()
        logger.info("tenant_namespace_dropped", namespace=namespace)
        return namespace
