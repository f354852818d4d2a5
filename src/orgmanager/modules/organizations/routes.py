"""Organization API routes.

Provides endpoints for:
- Creating an organization with its admin and tenant namespace
- Reading an organization from the registry
- Updating and deleting an organization (authenticated)
"""

from typing import Annotated

from fastapi import APIRouter, Body, Query, status

from orgmanager.core.auth.dependencies import CurrentPrincipal
from orgmanager.core.errors import ValidationError
from orgmanager.modules.organizations.dependencies import Lifecycle
from orgmanager.modules.organizations.schemas import (
    OrganizationCreated,
    OrganizationCreateRequest,
    OrganizationDeleted,
    OrganizationDeleteRequest,
    OrganizationRead,
    OrganizationUpdated,
    OrganizationUpdateRequest,
)


router = APIRouter(prefix="/org", tags=["organizations"])


@router.post(
    "/create",
    response_model=OrganizationCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create organization",
    description="Creates the organization, its admin account and its tenant namespace.",
)
async def create_organization(
    data: OrganizationCreateRequest,
    lifecycle: Lifecycle,
) -> OrganizationCreated:
    """Create a new organization."""
    return await lifecycle.create(data.organization_name, data.email, data.password)


@router.get(
    "/get",
    response_model=OrganizationRead,
    summary="Get organization",
)
async def get_organization(
    lifecycle: Lifecycle,
    organization_name: Annotated[str, Query(min_length=1)],
) -> OrganizationRead:
    """Get an organization by name."""
    return await lifecycle.get(organization_name)


@router.put(
    "/update",
    response_model=OrganizationUpdated,
    summary="Update organization admin",
    description="Replaces the admin's email and password. Org admins may only update their own organization.",
)
async def update_organization(
    data: OrganizationUpdateRequest,
    principal: CurrentPrincipal,
    lifecycle: Lifecycle,
) -> OrganizationUpdated:
    """Update an organization's admin credentials."""
    lifecycle.authorize(principal, data.organization_name)
    return await lifecycle.update(data.organization_name, data.email, data.password)


@router.delete(
    "/delete",
    response_model=OrganizationDeleted,
    summary="Delete organization",
    description=(
        "Deletes the registry record, the admin account and the tenant namespace. "
        "The organization name may be sent in the body or as a query parameter."
    ),
)
async def delete_organization(
    principal: CurrentPrincipal,
    lifecycle: Lifecycle,
    data: Annotated[OrganizationDeleteRequest | None, Body()] = None,
    organization_name: Annotated[str | None, Query()] = None,
) -> OrganizationDeleted:
    """Delete an organization."""
    org_name = data.organization_name if data else organization_name
    if not org_name:
        raise ValidationError("Organization name is required")

    lifecycle.authorize(principal, org_name)
    return await lifecycle.delete(org_name, requesting_principal_id=principal.admin_id)
