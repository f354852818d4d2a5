"""Exception handlers rendering failures as Problem Details (RFC 7807).

Every response carries ``type``, ``title``, ``status`` and ``detail``; the
request id is echoed as ``trace_id`` when RequestIdMiddleware set one.
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from orgmanager.core.errors.exceptions import AppException


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()

_LOCATION_PREFIXES = ("body", "query")


class FieldError(BaseModel):
    field: str
    message: str
    type: str | None = None


class ProblemDetail(BaseModel):
    """Problem Details body.

    Extra keys from ``AppException.details`` (``resource``, ``errors``, ...)
    are merged in at the top level.
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None
    errors: list[FieldError] | None = None
    trace_id: str | None = None

    model_config = {"extra": "allow"}


def _problem(
    request: Request,
    status_code: int,
    error_code: str,
    title: str,
    detail: str,
    errors: list[FieldError] | None = None,
) -> dict[str, Any]:
    settings = getattr(request.app.state, "settings", None)
    base_url = settings.api_docs_base_url if settings else "about:blank"
    return ProblemDetail(
        type=f"{base_url}/errors/{error_code}",
        title=title,
        status=status_code,
        detail=detail,
        instance=request.url.path,
        errors=errors,
        trace_id=getattr(request.state, "request_id", None),
    ).model_dump(exclude_none=True)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render an AppException; a 5xx logs its cause but never returns it."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "app_exception",
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
        cause=repr(exc.__cause__) if exc.__cause__ else None,
    )

    content = _problem(
        request,
        exc.status_code,
        exc.error_code,
        exc.error_code.replace("_", " ").title(),
        exc.message,
    )
    for key, value in exc.details.items():
        content.setdefault(key, value)
    return JSONResponse(status_code=exc.status_code, content=content)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request-schema failures as 400 with one entry per field."""
    errors = []
    for error in exc.errors():
        parts = [str(p) for p in error.get("loc", ()) if p not in _LOCATION_PREFIXES]
        errors.append(
            FieldError(
                field=".".join(parts) or "unknown",
                message=error.get("msg", "Invalid value"),
                type=error.get("type"),
            )
        )

    logger.warning("request_validation_failed", path=request.url.path, error_count=len(errors))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_problem(
            request,
            status.HTTP_400_BAD_REQUEST,
            "validation_error",
            "Validation Error",
            "Input validation failed",
            errors=errors,
        ),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", path=request.url.path, error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_problem(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "internal_error",
            "Internal Server Error",
            "An unexpected error occurred",
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, cast("ExceptionHandler", app_exception_handler))
    app.add_exception_handler(
        RequestValidationError, cast("ExceptionHandler", validation_exception_handler)
    )
    app.add_exception_handler(Exception, generic_exception_handler)
