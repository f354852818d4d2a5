"""Authentication API routes.

Provides endpoints for:
- Admin login
- Access token refresh
- Access token verification
"""

from fastapi import APIRouter

from orgmanager.core.auth.dependencies import CurrentPrincipal, Sessions
from orgmanager.core.auth.schemas import (
    AccessTokenResult,
    LoginRequest,
    LoginResult,
    RefreshTokenRequest,
    VerifyTokenResponse,
)


router = APIRouter(tags=["auth"])


@router.post(
    "/admin/login",
    response_model=LoginResult,
    summary="Admin login",
    description="Authenticate with email and password to receive access and refresh tokens.",
)
async def login(data: LoginRequest, sessions: Sessions) -> LoginResult:
    """Login with email and password."""
    return await sessions.login(data.email, data.password)


@router.post(
    "/auth/refresh",
    response_model=AccessTokenResult,
    response_model_exclude_none=True,
    summary="Refresh access token",
    description="Exchange the admin's current refresh token for a new access token.",
)
async def refresh_token(data: RefreshTokenRequest, sessions: Sessions) -> AccessTokenResult:
    """Refresh the access token."""
    return await sessions.refresh(data.admin_id, data.refresh_token)


@router.get(
    "/admin/verify-token",
    response_model=VerifyTokenResponse,
    summary="Verify access token",
)
async def verify_token(principal: CurrentPrincipal) -> VerifyTokenResponse:
    """Return the claims of a valid access token."""
    return VerifyTokenResponse(**principal.model_dump())
