"""FastAPI dependencies for the organizations module."""

from typing import Annotated

from fastapi import Depends

from orgmanager.api.dependencies import AppSettings, DBSession, Hasher, Tenants
from orgmanager.modules.admins.repos import AdminRepository
from orgmanager.modules.organizations.repos import OrganizationRepository
from orgmanager.modules.organizations.services import OrganizationLifecycle


def get_organization_lifecycle(
    db: DBSession,
    tenants: Tenants,
    hasher: Hasher,
    settings: AppSettings,
) -> OrganizationLifecycle:
    return OrganizationLifecycle(
        OrganizationRepository(db),
        AdminRepository(db),
        tenants,
        hasher,
        min_password_length=settings.min_password_length,
    )


Lifecycle = Annotated[OrganizationLifecycle, Depends(get_organization_lifecycle)]
