"""Pydantic schemas for organization operations."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from orgmanager.core.constants import (
    MAX_ORG_NAME_LENGTH,
    MAX_PASSWORD_LENGTH,
    MIN_ORG_NAME_LENGTH,
    MIN_PASSWORD_LENGTH,
)


OrganizationName = Annotated[
    str, Field(min_length=MIN_ORG_NAME_LENGTH, max_length=MAX_ORG_NAME_LENGTH)
]


# ============================================================
# Request Schemas
# ============================================================


class OrganizationCreateRequest(BaseModel):
    """Schema for creating an organization and its admin."""

    organization_name: OrganizationName
    email: EmailStr
    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )


class OrganizationUpdateRequest(BaseModel):
    """Schema for replacing an organization admin's email and password."""

    organization_name: OrganizationName
    email: EmailStr
    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )


class OrganizationDeleteRequest(BaseModel):
    """Schema for deleting an organization."""

    organization_name: OrganizationName


# ============================================================
# Response Schemas
# ============================================================


class OrganizationCreated(BaseModel):
    """Summary returned after creating an organization."""

    id: str
    organization_name: str
    db_name: str = Field(..., description="Generated tenant namespace identifier")
    admin_email: str
    created_at: datetime
    message: str = "Organization created successfully"


class OrganizationRead(BaseModel):
    """Organization record as stored in the registry."""

    id: str
    organization_name: str
    db_name: str
    admin_email: str
    created_at: datetime
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class OrganizationUpdated(BaseModel):
    organization_name: str
    message: str = "Organization updated successfully"


class OrganizationDeleted(BaseModel):
    organization_name: str
    message: str = "Organization deleted successfully"
