"""Error handling module with RFC 7807 Problem Details."""

from orgmanager.core.errors.exceptions import (
    AppException,
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    NotFoundError,
    RefreshMismatchError,
    StoreFailureError,
    UnauthorizedError,
    ValidationError,
)
from orgmanager.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    # Exceptions
    "AppException",
    "ConflictError",
    # Handlers
    "FieldError",
    "ForbiddenError",
    "InvalidCredentialsError",
    "InvalidRefreshTokenError",
    "InvalidTokenError",
    "NotFoundError",
    "ProblemDetail",
    "RefreshMismatchError",
    "StoreFailureError",
    "UnauthorizedError",
    "ValidationError",
    "register_exception_handlers",
]
