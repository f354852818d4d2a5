"""Authentication backend for JWT and password handling.

This module provides the two stateless auth primitives:
- PasswordHasher: bcrypt hashing and verification
- TokenIssuer: JWT access/refresh issuance, verification and the
  refresh-token fingerprint stored for comparison
"""

import hashlib
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from orgmanager.config import Settings
from orgmanager.core.auth.schemas import PrincipalClaims
from orgmanager.core.constants import (
    BCRYPT_ROUNDS,
    REFRESH_TOKEN_JTI_LENGTH,
    ROLE_ORG_ADMIN,
    TOKEN_TYPE_ACCESS,
    TOKEN_TYPE_REFRESH,
)
from orgmanager.core.errors import InvalidTokenError


# ============================================================
# Password Utilities
# ============================================================


class PasswordHasher:
    """One-way password hashing with bcrypt."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS) -> None:
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Bcrypt hash of the password
        """
        return self._context.hash(password)

    def verify(self, password: str, hashed_password: str | None) -> bool:
        """Verify a password against its hash.

        Never raises for a wrong password; an empty or unrecognised
        stored hash also verifies as False.

        Args:
            password: Plain text password to verify
            hashed_password: Bcrypt hash to verify against

        Returns:
            True if password matches, False otherwise
        """
        if not password or not hashed_password:
            return False
        try:
            return self._context.verify(password, hashed_password)
        except ValueError:
            return False


# ============================================================
# JWT Token Utilities
# ============================================================


class TokenIssuer:
    """Issues and verifies signed, time-limited JWTs.

    Access tokens carry the principal, its organization and role.
    Refresh tokens carry the principal, its organization and a type
    marker; they are only honoured when their fingerprint matches the
    one stored for the principal.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
    ) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            secret_key=settings.secret_key,
            algorithm=settings.jwt_algorithm,
            access_ttl=timedelta(minutes=settings.access_token_expire_minutes),
            refresh_ttl=timedelta(days=settings.refresh_token_expire_days),
        )

    @property
    def access_expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return int(self.access_ttl.total_seconds())

    def issue_access(
        self,
        principal_id: UUID | str,
        org_id: UUID | str | None,
        org_name: str | None,
        role: str = ROLE_ORG_ADMIN,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a short-lived JWT access token.

        Args:
            principal_id: The admin principal's id
            org_id: The principal's organization id
            org_name: The principal's organization name
            role: Principal role (admin or org_admin)
            expires_delta: Optional custom expiration time

        Returns:
            Encoded JWT access token
        """
        now = datetime.now(UTC)
        claims: dict[str, Any] = {
            "sub": str(principal_id),
            "org_id": str(org_id) if org_id else None,
            "org_name": org_name,
            "role": role,
            "type": TOKEN_TYPE_ACCESS,
            "iat": now,
            "exp": now + (expires_delta if expires_delta is not None else self.access_ttl),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def issue_refresh(
        self,
        principal_id: UUID | str,
        org_id: UUID | str | None,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a long-lived JWT refresh token.

        The jti keeps two tokens issued within the same second distinct,
        so each login yields a different fingerprint.

        Args:
            principal_id: The admin principal's id
            org_id: The principal's organization id
            expires_delta: Optional custom expiration time

        Returns:
            Encoded JWT refresh token
        """
        now = datetime.now(UTC)
        claims: dict[str, Any] = {
            "sub": str(principal_id),
            "org_id": str(org_id) if org_id else None,
            "type": TOKEN_TYPE_REFRESH,
            "jti": secrets.token_urlsafe(REFRESH_TOKEN_JTI_LENGTH),
            "iat": now,
            "exp": now + (expires_delta if expires_delta is not None else self.refresh_ttl),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        """Decode and validate a JWT.

        Args:
            token: The JWT to decode

        Returns:
            The decoded claims

        Raises:
            InvalidTokenError: On bad signature, malformed payload or expiry
        """
        if not token:
            raise InvalidTokenError()
        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except (JWTError, ValueError) as exc:
            raise InvalidTokenError() from exc

        if not claims.get("sub") or "exp" not in claims:
            raise InvalidTokenError()
        return claims

    def verify_access(self, token: str) -> PrincipalClaims:
        """Verify an access token and return its principal claims.

        Raises:
            InvalidTokenError: If the token is invalid, expired or not an access token
        """
        claims = self.verify(token)
        if claims.get("type", TOKEN_TYPE_ACCESS) != TOKEN_TYPE_ACCESS:
            raise InvalidTokenError()
        return PrincipalClaims(
            admin_id=claims["sub"],
            organization_id=claims.get("org_id"),
            organization_name=claims.get("org_name"),
            role=claims.get("role", ROLE_ORG_ADMIN),
        )

    @staticmethod
    def fingerprint(token: str) -> str:
        """Hash a token for storage comparison.

        Args:
            token: The token to hash

        Returns:
            SHA-256 hex digest of the token
        """
        return hashlib.sha256(token.encode()).hexdigest()
