"""Authentication primitives: password hashing, JWT issuance and claims."""

from orgmanager.core.auth.backend import PasswordHasher, TokenIssuer
from orgmanager.core.auth.schemas import (
    AccessTokenResult,
    LoginResult,
    PrincipalClaims,
)


__all__ = [
    "AccessTokenResult",
    "LoginResult",
    "PasswordHasher",
    "PrincipalClaims",
    "TokenIssuer",
]
