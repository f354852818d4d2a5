"""Authentication schemas for token handling."""

from pydantic import BaseModel, EmailStr, Field


class PrincipalClaims(BaseModel):
    """Claims carried by a verified access token.

    Attributes:
        admin_id: The admin principal's id (``sub``)
        organization_id: The principal's organization id
        organization_name: The principal's organization name
        role: Either ``admin`` or ``org_admin``
    """

    admin_id: str
    organization_id: str | None = None
    organization_name: str | None = None
    role: str


class LoginRequest(BaseModel):
    """Schema for email/password login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(BaseModel):
    """Schema for refreshing an access token."""

    admin_id: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)


class LoginResult(BaseModel):
    """Token pair plus the metadata returned on login."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration in seconds")
    admin_id: str
    organization_id: str | None = None
    organization_name: str | None = None


class AccessTokenResult(BaseModel):
    """Schema for a refreshed access token.

    ``refresh_token`` is only set when refresh-token rotation is enabled.
    """

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    refresh_token: str | None = None


class VerifyTokenResponse(PrincipalClaims):
    """Response of the verify-token endpoint."""

    message: str = "Token is valid"
