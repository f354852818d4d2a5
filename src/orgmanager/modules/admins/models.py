"""Admin principal database models."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from orgmanager.core.constants import (
    MAX_EMAIL_LENGTH,
    MAX_ORG_NAME_LENGTH,
    MAX_ROLE_LENGTH,
    ROLE_ORG_ADMIN,
    SHA256_HEX_LENGTH,
)
from orgmanager.core.database.base import Base, TimestampMixin, UUIDMixin


class AdminUser(Base, UUIDMixin, TimestampMixin):
    """The admin principal of an organization, stored in the registry.

    Attributes:
        admin_email: Globally unique login email
        password_hash: Bcrypt-hashed password
        role: ``admin`` (super-admin) or ``org_admin`` (scoped to one organization)
        organization_id: Owning organization; NULL only while it is being created
        organization_name: Denormalised organization name, carried in access tokens
        refresh_token_hash: SHA-256 fingerprint of the latest refresh token
        refresh_token_issued_at: When that refresh token was issued
        is_active: Whether the principal can log in
    """

    __tablename__ = "admin_users"

    admin_email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    role: Mapped[str] = mapped_column(
        String(MAX_ROLE_LENGTH),
        default=ROLE_ORG_ADMIN,
        nullable=False,
    )
    organization_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("organizations.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    organization_name: Mapped[str | None] = mapped_column(
        String(MAX_ORG_NAME_LENGTH),
        nullable=True,
    )
    refresh_token_hash: Mapped[str | None] = mapped_column(
        String(SHA256_HEX_LENGTH),
        nullable=True,
    )
    refresh_token_issued_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<AdminUser(id={self.id}, email={self.admin_email}, role={self.role})>"
