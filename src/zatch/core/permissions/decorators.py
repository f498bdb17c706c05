"""Permission decorators for route protection.

Routes declare the page and action they touch; the decorator checks the
caller's membership role against the role permission grid before the
handler runs.
"""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

import structlog

from zatch.core.errors import ForbiddenError, UnauthorizedError


if TYPE_CHECKING:
    from zatch.modules.tenants.context import TenantContext


logger = structlog.get_logger()

P = ParamSpec("P")
R = TypeVar("R")


def require_permission(
    page_key: str, action: str = "view"
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires a page permission to access a route.

    The route must take the tenant context as a ``context`` parameter.

    Usage:
        @router.delete("/properties/{property_id}")
        @require_permission("properties", "delete")
        async def delete_property(property_id: UUID, context: MemberContext):
            ...

    Raises:
        UnauthorizedError: If the route has no signed-in member context
        ForbiddenError: If the member's role lacks the permission
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            context: TenantContext | Any = kwargs.get("context")
            if context is None or context.membership is None:
                raise UnauthorizedError(
                    "Authentication required",
                    error_code="auth_required",
                )

            if not await context.permissions.can_access(context.role, page_key, action):
                logger.info(
                    "permission_denied",
                    role=context.role,
                    page_key=page_key,
                    action=action,
                    tenant_id=str(context.tenant.id),
                )
                raise ForbiddenError(
                    f"Missing required permission: {page_key}:{action}",
                    error_code="permission_denied",
                    details={"page_key": page_key, "action": action},
                )

            return await func(*args, **kwargs)

        return wrapper

    return decorator
