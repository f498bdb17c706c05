"""Per-request tenant context.

Every tenant-scoped route depends on one of the aliases below. The
dependency resolves the request hostname, settles an ``AccessGate`` and
either hands the route a ``TenantContext`` or raises ``TenantGateError``
with the screen to show.

* ``AdminContext``   admin domain, anonymous callers pass
* ``MemberContext``  admin domain, caller must be a signed-in member
* ``PublicContext``  public domain, no user involved
"""

from dataclasses import dataclass
from typing import Annotated, Any

import structlog
from fastapi import Depends, Request

from zatch.api.dependencies import DBSession
from zatch.config import settings
from zatch.core.auth.dependencies import OptionalUser
from zatch.core.errors import UnauthorizedError
from zatch.core.permissions import PermissionChecker
from zatch.core.utils.hosts import request_hostname
from zatch.modules.tenants.gate import AccessGate, GateOutcome, GateState
from zatch.modules.tenants.models import Domain, DomainType, Tenant, TenantUser
from zatch.modules.tenants.repos import MembershipRepository
from zatch.modules.tenants.resolver import TenantResolver


@dataclass
class TenantContext:
    """The tenant a request acts on, and who is acting."""

    tenant: Tenant
    domain: Domain | None
    permissions: PermissionChecker
    user: Any | None = None
    membership: TenantUser | None = None

    @property
    def role(self) -> str | None:
        return self.membership.role if self.membership else None

    @property
    def is_tenant_member(self) -> bool:
        return self.membership is not None

    async def can_access(self, page_key: str, action: str = "view") -> bool:
        return await self.permissions.can_access(self.role, page_key, action)


async def settle_gate(
    request: Request,
    db: DBSession,
    domain_type: DomainType,
    user: Any | None = None,
) -> GateOutcome:
    """Resolve the request hostname and run the access gate.

    A successful resolution remembers the tenant id in the
    ``active_tenant_id`` cookie; a failed one forgets it, so a retry starts
    from scratch. The cookie change is left on ``request.state.tenant_cookie``
    for ``HostContextMiddleware``, which writes it on whatever response goes
    out, gate problems included.
    """
    hostname = getattr(request.state, "hostname", None) or request_hostname(request)
    stored_tenant_id = request.cookies.get(settings.tenant_cookie_name)

    resolution = await TenantResolver(db).resolve(hostname, domain_type, stored_tenant_id)

    membership = None
    if resolution.is_resolved and user is not None:
        membership = await MembershipRepository(db).get(
            resolution.tenant.id,  # type: ignore[union-attr]
            user.id,
        )

    outcome = AccessGate().settle(resolution, user=user, membership=membership)

    if resolution.tenant is not None and resolution.is_resolved:
        tenant_id = str(resolution.tenant.id)
        request.state.tenant_id = resolution.tenant.id
        structlog.contextvars.bind_contextvars(tenant_id=tenant_id)
        if stored_tenant_id != tenant_id:
            request.state.tenant_cookie = tenant_id
    elif stored_tenant_id:
        request.state.tenant_cookie = ""

    return outcome


def _context_from(outcome: GateOutcome, db: DBSession, user: Any | None) -> TenantContext:
    if outcome.state in (GateState.ERROR, GateState.NOT_MEMBER):
        raise outcome.to_exception()
    return TenantContext(
        tenant=outcome.resolution.tenant,  # type: ignore[arg-type]
        domain=outcome.resolution.domain,
        permissions=PermissionChecker(db),
        user=user,
        membership=outcome.membership,
    )


async def get_admin_context(
    request: Request,
    db: DBSession,
    user: OptionalUser,
) -> TenantContext:
    """Tenant behind an admin hostname. Signed-in callers must be members."""
    outcome = await settle_gate(request, db, DomainType.ADMIN, user)
    return _context_from(outcome, db, user)


async def get_member_context(
    context: Annotated[TenantContext, Depends(get_admin_context)],
) -> TenantContext:
    """Admin context for a signed-in member.

    Raises:
        UnauthorizedError: For anonymous callers
    """
    if context.user is None or context.membership is None:
        raise UnauthorizedError(
            "Authentication required",
            error_code="auth_required",
        )
    return context


async def get_public_context(
    request: Request,
    db: DBSession,
) -> TenantContext:
    """Tenant behind a public storefront hostname."""
    outcome = await settle_gate(request, db, DomainType.PUBLIC)
    return _context_from(outcome, db, None)


AdminContext = Annotated[TenantContext, Depends(get_admin_context)]
MemberContext = Annotated[TenantContext, Depends(get_member_context)]
PublicContext = Annotated[TenantContext, Depends(get_public_context)]
