"""Database layer - lifecycle, base models, and tenant namespaces."""

from orgmanager.core.database.base import Base, TimestampMixin, UUIDMixin
from orgmanager.core.database.session import Database, DatabaseNotConnected
from orgmanager.core.database.tenant import (
    TenantHandle,
    TenantStore,
    namespace_for,
    tenant_users_table,
)


__all__ = [
    "Base",
    "Database",
    "DatabaseNotConnected",
    "TenantHandle",
    "TenantStore",
    "TimestampMixin",
    "UUIDMixin",
    "namespace_for",
    "tenant_users_table",
]
