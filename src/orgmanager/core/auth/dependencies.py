"""FastAPI dependencies for authentication.

This module provides FastAPI dependency injection functions for:
- Extracting and validating the bearer access token
- Building the session manager for a request
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from orgmanager.api.dependencies import AppSettings, DBSession, Hasher, Issuer
from orgmanager.core.auth.schemas import PrincipalClaims
from orgmanager.core.auth.service import SessionManager
from orgmanager.core.errors import UnauthorizedError
from orgmanager.modules.admins.repos import AdminRepository


# HTTP Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    issuer: Issuer,
    request: Request,
) -> PrincipalClaims:
    """Extract and validate the principal from the Authorization header.

    Args:
        credentials: Bearer token credentials from the request
        issuer: Token issuer holding the signing secret
        request: The incoming request

    Returns:
        The verified principal claims

    Raises:
        UnauthorizedError: If the token is missing
        InvalidTokenError: If the token is invalid, expired or not an access token
    """
    if not credentials:
        raise UnauthorizedError(
            "Authorization header missing",
            error_code="missing_token",
        )

    principal = issuer.verify_access(credentials.credentials)
    request.state.admin_id = principal.admin_id
    request.state.org_id = principal.organization_id
    return principal


def get_session_manager(
    db: DBSession,
    hasher: Hasher,
    issuer: Issuer,
    settings: AppSettings,
) -> SessionManager:
    return SessionManager(
        AdminRepository(db),
        hasher,
        issuer,
        rotate_refresh_tokens=settings.rotate_refresh_tokens,
    )


# Type aliases for cleaner dependency injection
CurrentPrincipal = Annotated[PrincipalClaims, Depends(get_current_principal)]
Sessions = Annotated[SessionManager, Depends(get_session_manager)]
