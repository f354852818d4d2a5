"""Principal context and request tracing middleware."""

import uuid

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from orgmanager.core.errors import InvalidTokenError


logger = structlog.get_logger()


class PrincipalContextMiddleware(BaseHTTPMiddleware):
    """Bind the caller's admin and organization ids to the log context.

    Only a valid access token contributes context. Rejecting a missing or
    invalid token is left to the route dependency.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            token = auth_header.split(" ", 1)[1]
            try:
                principal = request.app.state.token_issuer.verify_access(token)
            except InvalidTokenError:
                principal = None

            if principal is not None:
                request.state.admin_id = principal.admin_id
                request.state.org_id = principal.organization_id
                structlog.contextvars.bind_contextvars(
                    admin_id=principal.admin_id,
                    org_id=principal.organization_id,
                )

        return await call_next(request)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware that adds a unique request ID to each request.

    The request ID is added to:
    - request.state.request_id
    - Response header X-Request-ID
    - Structlog context
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "admin_id", "org_id")

        response.headers["X-Request-ID"] = request_id
        return response
