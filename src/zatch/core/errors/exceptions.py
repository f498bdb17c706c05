"""Errors raised by services and dependencies.

Each class fixes the HTTP status and a default ``error_code``; the handlers
in ``handlers.py`` render them as problem responses whose ``code`` member is
the error code, with ``details`` merged in as extra members.
"""

from typing import Any


class AppException(Exception):
    """Base class for every error that maps to a problem response.

    Attributes:
        message: Shown to the client as ``detail``
        error_code: Stable snake_case code clients switch on
        status_code: HTTP status of the response
        details: Extra members for the problem body
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


class NotFoundError(AppException):
    """A listing, domain, member or portal outside the caller's tenant or
    absent altogether. Both cases look the same to the client."""

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


class ConflictError(AppException):
    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class UnauthorizedError(AppException):
    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401


class ForbiddenError(AppException):
    """Signed in, but the role or the membership rules say no."""

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403


class BadRequestError(AppException):
    message = "Bad request"
    error_code = "bad_request"
    status_code = 400


class RateLimitError(AppException):
    """An upstream API (the AI gateway) asked us to slow down."""

    message = "Rate limit exceeded"
    error_code = "rate_limit_exceeded"
    status_code = 429


class ServiceUnavailableError(AppException):
    message = "Service temporarily unavailable"
    error_code = "service_unavailable"
    status_code = 503


class TenantGateError(AppException):
    """The access gate blocked the request.

    ``error_code`` is the lowercased resolution failure (or ``not_member``)
    and ``details["screen"]`` the screen a client should render. The status
    varies with the failure, so it is passed in rather than fixed.
    """

    message = "Tenant access blocked"
    error_code = "tenant_gate_blocked"
    status_code = 403

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)
        if status_code is not None:
            self.status_code = status_code
