"""Session manager for admin login and access-token refresh."""

import hmac
from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError

from orgmanager.core.auth.backend import PasswordHasher, TokenIssuer
from orgmanager.core.auth.schemas import AccessTokenResult, LoginResult
from orgmanager.core.constants import TOKEN_TYPE_REFRESH
from orgmanager.core.errors import (
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    NotFoundError,
    RefreshMismatchError,
    StoreFailureError,
    ValidationError,
)
from orgmanager.modules.admins.models import AdminUser
from orgmanager.modules.admins.repos import AdminRepository


logger = structlog.get_logger()


class SessionManager:
    """Service for admin authentication.

    Login stores the fingerprint of the refresh token it issues, which
    invalidates whatever refresh token the principal held before. Refresh
    checks the presented token against that fingerprint and, unless
    rotation is enabled, issues only a new access token.
    """

    def __init__(
        self,
        admins: AdminRepository,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        rotate_refresh_tokens: bool = False,
    ) -> None:
        self.admins = admins
        self.hasher = hasher
        self.issuer = issuer
        self.rotate_refresh_tokens = rotate_refresh_tokens

    async def login(self, email: str, password: str) -> LoginResult:
        """Authenticate an admin with email and password.

        Args:
            email: Admin email address
            password: Plain text password

        Returns:
            Access and refresh tokens with their metadata

        Raises:
            ValidationError: If email or password is missing
            InvalidCredentialsError: If the email is unknown or the password is wrong
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        try:
            admin = await self.admins.get_by_email(email)
        except SQLAlchemyError as exc:
            raise StoreFailureError("Login failed") from exc

        # Unknown email and wrong password are indistinguishable to the caller
        if admin is None or not self.hasher.verify(password, admin.password_hash):
            logger.warning("admin_login_failed")
            raise InvalidCredentialsError()
        if not admin.is_active:
            logger.warning("admin_login_inactive", admin_id=str(admin.id))
            raise InvalidCredentialsError()

        access_token = self._issue_access(admin)
        refresh_token = await self._issue_refresh(admin)

        logger.info(
            "admin_login_succeeded",
            admin_id=str(admin.id),
            organization_name=admin.organization_name,
        )
        return LoginResult(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.issuer.access_expires_in,
            admin_id=str(admin.id),
            organization_id=str(admin.organization_id) if admin.organization_id else None,
            organization_name=admin.organization_name,
        )

    async def refresh(self, principal_id: UUID | str, refresh_token: str) -> AccessTokenResult:
        """Issue a new access token from a refresh token.

        Args:
            principal_id: The admin principal's id
            refresh_token: The refresh token obtained at login

        Returns:
            A new access token, plus a new refresh token when rotation is on

        Raises:
            InvalidRefreshTokenError: If the token is invalid, expired or not a refresh
                token, or the principal is inactive
            NotFoundError: If the principal does not exist
            RefreshMismatchError: If the token is not the principal's current refresh token
        """
        try:
            claims = self.issuer.verify(refresh_token)
        except InvalidTokenError as exc:
            logger.warning("token_refresh_failed", reason="invalid_token")
            raise InvalidRefreshTokenError() from exc
        if claims.get("type") != TOKEN_TYPE_REFRESH:
            logger.warning("token_refresh_failed", reason="wrong_token_type")
            raise InvalidRefreshTokenError()

        admin = await self._get_admin(principal_id)
        if not admin.is_active:
            logger.warning("token_refresh_failed", reason="inactive", admin_id=str(admin.id))
            raise InvalidRefreshTokenError()

        presented = self.issuer.fingerprint(refresh_token)
        stored = admin.refresh_token_hash or ""
        if not hmac.compare_digest(presented, stored):
            logger.warning(
                "token_refresh_failed", reason="fingerprint_mismatch", admin_id=str(admin.id)
            )
            raise RefreshMismatchError()

        access_token = self._issue_access(admin)
        rotated = await self._issue_refresh(admin) if self.rotate_refresh_tokens else None

        logger.info("token_refreshed", admin_id=str(admin.id), rotated=rotated is not None)
        return AccessTokenResult(
            access_token=access_token,
            expires_in=self.issuer.access_expires_in,
            refresh_token=rotated,
        )

    async def _get_admin(self, principal_id: UUID | str) -> AdminUser:
        try:
            admin_uuid = principal_id if isinstance(principal_id, UUID) else UUID(principal_id)
        except ValueError as exc:
            raise NotFoundError("Admin not found", resource="admin") from exc

        try:
            admin = await self.admins.get_by_id(admin_uuid)
        except SQLAlchemyError as exc:
            raise StoreFailureError("Token refresh failed") from exc
        if admin is None:
            logger.warning("token_refresh_failed", reason="admin_not_found")
            raise NotFoundError("Admin not found", resource="admin")
        return admin

    def _issue_access(self, admin: AdminUser) -> str:
        return self.issuer.issue_access(
            admin.id,
            admin.organization_id,
            admin.organization_name,
            admin.role,
        )

    async def _issue_refresh(self, admin: AdminUser) -> str:
        """Issue a refresh token and make it the principal's only valid one."""
        refresh_token = self.issuer.issue_refresh(admin.id, admin.organization_id)
        try:
            await self.admins.store_refresh_fingerprint(
                admin,
                self.issuer.fingerprint(refresh_token),
                datetime.now(UTC),
            )
        except SQLAlchemyError as exc:
            raise StoreFailureError("Failed to store refresh token") from exc
        return refresh_token
