"""RFC 7807 problem responses.

Every error leaves the API as ``application/json`` with the RFC 7807 members
(``type``, ``title``, ``status``, ``detail``, ``instance``) plus ``code``,
the machine-readable error code, and ``trace_id``, the request id. Gate
errors additionally carry the ``screen`` to render.

See: https://tools.ietf.org/html/rfc7807
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from zatch.config import settings
from zatch.core.errors.exceptions import AppException, TenantGateError


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()


class FieldError(BaseModel):
    field: str
    message: str
    type: str | None = None


class ProblemDetail(BaseModel):
    """Problem body. Extra members (``screen``, ``resource``...) are allowed."""

    type: str
    title: str
    status: int
    detail: str
    code: str
    instance: str | None = None
    errors: list[FieldError] | None = None
    trace_id: str | None = None

    model_config = {"extra": "allow"}


def _problem(
    request: Request,
    status_code: int,
    code: str,
    detail: str,
    title: str | None = None,
    **extra: Any,
) -> JSONResponse:
    problem = ProblemDetail(
        type=f"{settings.api_docs_base_url}/errors/{code}",
        title=title or code.replace("_", " ").title(),
        status=status_code,
        detail=detail,
        code=code,
        instance=str(request.url.path),
        trace_id=getattr(request.state, "trace_id", None),
        **extra,
    )
    return JSONResponse(status_code=status_code, content=problem.model_dump(exclude_none=True))


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render an ``AppException``; its details become extra members."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "tenant_gate_blocked" if isinstance(exc, TenantGateError) else "app_exception",
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        path=str(request.url.path),
        hostname=getattr(request.state, "hostname", None),
    )

    reserved = ProblemDetail.model_fields.keys()
    extra = {key: value for key, value in exc.details.items() if key not in reserved}
    return _problem(request, exc.status_code, exc.error_code, exc.message, **extra)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """422 with one entry per invalid field, ``body.`` prefix dropped."""
    errors = []
    for error in exc.errors():
        parts = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append(
            FieldError(
                field=".".join(parts) or "unknown",
                message=error.get("msg", "Invalid value"),
                type=error.get("type"),
            )
        )

    logger.warning("validation_error", path=str(request.url.path), error_count=len(errors))
    return _problem(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        "Request validation failed",
        errors=errors,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Log the traceback, expose nothing
    logger.exception(
        "unhandled_exception",
        path=str(request.url.path),
        error_type=type(exc).__name__,
    )
    return _problem(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
        title="Internal Server Error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, cast("ExceptionHandler", app_exception_handler))
    app.add_exception_handler(
        RequestValidationError, cast("ExceptionHandler", validation_exception_handler)
    )
    app.add_exception_handler(Exception, generic_exception_handler)
