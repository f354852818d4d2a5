"""Domain exceptions for the application.

These exceptions represent business-logic errors and are automatically
converted to RFC 7807 Problem Details responses by the exception handlers.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All domain exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppException):
    """Raised when input is missing or malformed, before any store access.

    Example:
        raise ValidationError(
            "Invalid input data",
            errors=[{"field": "email", "message": "Invalid email format"}]
        )
    """

    message = "Input validation failed"
    error_code = "validation_error"
    status_code = 400

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """Raised when a unique key (organization name, admin email) is taken.

    Example:
        raise ConflictError("Organization with this name already exists")
    """

    message = "Resource already exists"
    error_code = "already_exists"
    status_code = 409


class NotFoundError(AppException):
    """Raised when a referenced entity is absent.

    Example:
        raise NotFoundError("Organization not found", resource="organization")
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class UnauthorizedError(AppException):
    """Raised when authentication is required but not provided or invalid."""

    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401


class InvalidCredentialsError(UnauthorizedError):
    """Login failure. Same message whether the email or the password was wrong."""

    message = "Invalid credentials"
    error_code = "invalid_credentials"


class InvalidTokenError(UnauthorizedError):
    """Bad signature, malformed payload or expired token."""

    message = "Invalid or expired token"
    error_code = "invalid_token"


class InvalidRefreshTokenError(UnauthorizedError):
    """Presented refresh token failed verification or is not a refresh token."""

    message = "Invalid or expired refresh token"
    error_code = "invalid_refresh_token"


class RefreshMismatchError(UnauthorizedError):
    """Presented refresh token does not match the stored fingerprint."""

    message = "Refresh token mismatch"
    error_code = "refresh_token_mismatch"


class ForbiddenError(AppException):
    """Raised when the principal lacks rights over the target organization.

    Example:
        raise ForbiddenError(
            "Cannot modify other organizations",
            details={"organization_name": org_name}
        )
    """

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403


class StoreFailureError(AppException):
    """Wraps an underlying persistence error.

    Example:
        try:
            await repo.create(org)
        except SQLAlchemyError as exc:
            raise StoreFailureError("Failed to create organization") from exc
    """

    message = "Storage operation failed"
    error_code = "store_failure"
    status_code = 500
