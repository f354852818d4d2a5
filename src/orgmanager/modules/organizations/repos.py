"""Organization repository for registry operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orgmanager.modules.organizations.models import Organization


class OrganizationRepository:
    """Repository for Organization database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, organization: Organization) -> Organization:
        """Insert an organization record.

        The unique constraint on the name rejects a concurrent duplicate
        here even if it passed the existence check.

        Args:
            organization: Organization instance to create

        Returns:
            The created organization with ID populated
        """
        self.session.add(organization)
        await self.session.flush()
        await self.session.refresh(organization)
        return organization

    async def get_by_name(self, name: str) -> Organization | None:
        """Get an organization by its exact name.

        Args:
            name: The organization name

        Returns:
            Organization if found, None otherwise
        """
        stmt = select(Organization).where(Organization.organization_name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_namespace(self, namespace: str) -> Organization | None:
        stmt = select(Organization).where(Organization.namespace == namespace)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_admin_email(self, organization: Organization, email: str) -> None:
        organization.admin_email = email
        await self.session.flush()

    async def delete(self, organization: Organization) -> None:
        await self.session.delete(organization)
        await self.session.flush()
