"""Request context middleware.

This module provides middleware for:
- Request tracing with unique IDs
- Recording which hostname (and therefore which tenant) a request targets
- Writing the ``active_tenant_id`` cookie the tenant resolver asked for
"""

import uuid

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from zatch.config import settings
from zatch.core.auth.backend import decode_token
from zatch.core.utils.hosts import request_hostname


class HostContextMiddleware(BaseHTTPMiddleware):
    """Middleware that records the request hostname and caller.

    Stores the normalised hostname in ``request.state.hostname`` for the
    tenant resolver and binds it, together with the user id from a valid
    bearer token, to the structlog context. On the way out it applies the
    tenant cookie change recorded during resolution.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        hostname = request_hostname(request)
        request.state.hostname = hostname
        structlog.contextvars.bind_contextvars(hostname=hostname)

        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            token_data = decode_token(auth_header.split(" ", 1)[1])
            if token_data:
                request.state.user_id = token_data.user_id
                structlog.contextvars.bind_contextvars(user_id=str(token_data.user_id))

        response = await call_next(request)
        apply_tenant_cookie(request, response)
        return response


def apply_tenant_cookie(request: Request, response: Response) -> None:
    """Set or clear ``active_tenant_id`` as recorded in ``request.state``.

    ``request.state.tenant_cookie`` holds the tenant id to remember, or an
    empty string to forget the stored one. Requests that never resolved a
    tenant leave the cookie alone.
    """
    tenant_id = getattr(request.state, "tenant_cookie", None)
    if tenant_id is None:
        return
    if tenant_id:
        response.set_cookie(
            settings.tenant_cookie_name,
            tenant_id,
            max_age=settings.tenant_cookie_max_age,
            httponly=True,
            samesite="lax",
            secure=settings.is_production,
        )
    else:
        response.delete_cookie(settings.tenant_cookie_name)


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
        request.state.trace_id = request_id  # Alias for error handler

        structlog.contextvars.bind_contextvars(request_id=request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        structlog.contextvars.unbind_contextvars(
            "request_id", "hostname", "tenant_id", "user_id"
        )

        return response
