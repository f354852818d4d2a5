"""Admin principal repository for registry operations."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from orgmanager.modules.admins.models import AdminUser


class AdminRepository:
    """Repository for AdminUser database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, admin: AdminUser) -> AdminUser:
        """Create a new admin principal.

        Args:
            admin: AdminUser instance to create

        Returns:
            The created principal with ID populated
        """
        self.session.add(admin)
        await self.session.flush()
        return admin

    async def get_by_id(self, admin_id: UUID) -> AdminUser | None:
        return await self.session.get(AdminUser, admin_id)

    async def get_by_email(self, email: str) -> AdminUser | None:
        """Get a principal by its login email.

        Args:
            email: The admin email

        Returns:
            AdminUser if found, None otherwise
        """
        stmt = select(AdminUser).where(AdminUser.admin_email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def set_organization(
        self, admin: AdminUser, organization_id: UUID, organization_name: str
    ) -> None:
        """Back-fill the principal's organization reference."""
        admin.organization_id = organization_id
        admin.organization_name = organization_name
        await self.session.flush()

    async def update_credentials(
        self, admin: AdminUser, email: str, password_hash: str
    ) -> None:
        admin.admin_email = email
        admin.password_hash = password_hash
        await self.session.flush()

    async def store_refresh_fingerprint(
        self, admin: AdminUser, fingerprint: str, issued_at: datetime
    ) -> None:
        """Overwrite the stored refresh-token fingerprint.

        Any refresh token issued before this one stops matching.
        """
        admin.refresh_token_hash = fingerprint
        admin.refresh_token_issued_at = issued_at
        await self.session.flush()

    async def delete(self, admin_id: UUID) -> int:
        """Delete a principal by id.

        Returns:
            Number of rows deleted
        """
        result = await self.session.execute(
            delete(AdminUser).where(AdminUser.id == admin_id)
        )
        await self.session.flush()
        return int(result.rowcount or 0)  # type: ignore[attr-defined]
