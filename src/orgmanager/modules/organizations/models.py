"""Organization registry models."""

from uuid import UUID

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from orgmanager.core.constants import MAX_EMAIL_LENGTH, MAX_ORG_NAME_LENGTH
from orgmanager.core.database.base import Base, TimestampMixin, UUIDMixin


class Organization(Base, UUIDMixin, TimestampMixin):
    """Organization record in the registry.

    Attributes:
        organization_name: Unique, case-sensitive name as given
        namespace: Tenant namespace identifier derived from the name
        admin_email: Contact email of the organization admin
        admin_id: The admin principal's id
        is_active: Whether the organization is active
    """

    __tablename__ = "organizations"

    organization_name: Mapped[str] = mapped_column(
        String(MAX_ORG_NAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    namespace: Mapped[str] = mapped_column(
        String(MAX_ORG_NAME_LENGTH + 8),
        nullable=False,
        unique=True,
    )
    admin_email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
    )
    admin_id: Mapped[UUID | None] = mapped_column(
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<Organization(id={self.id}, name={self.organization_name}, "
            f"namespace={self.namespace})>"
        )
