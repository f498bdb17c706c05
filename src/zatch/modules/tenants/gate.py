"""Access gate.

The gate sits between hostname resolution and any tenant-scoped operation.
It starts in ``loading`` and settles exactly once into one of:

* ``allowed``     the tenant resolved and the caller is a member (or anonymous)
* ``not_member``  the tenant resolved but the signed-in user has no membership
* ``error``       resolution failed; the screen explains which way

Settled gates never move again. A client that wants another attempt makes a
new request, which builds a new gate.

Blocked outcomes carry a ``GateScreen``: the fixed informational screen a
client renders (DNS instructions for unverified domains, a logout action
for non-members, and so on).
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from fastapi import status
from pydantic import BaseModel

from zatch.config import settings
from zatch.core.errors import TenantGateError
from zatch.modules.tenants.models import Domain, DomainType, TenantUser
from zatch.modules.tenants.resolver import ResolutionError, TenantResolution


NOT_MEMBER_CODE = "NOT_MEMBER"


class GateState(StrEnum):
    LOADING = "loading"
    ALLOWED = "allowed"
    NOT_MEMBER = "not_member"
    ERROR = "error"


class GateAction(StrEnum):
    """What the screen lets the visitor do next."""

    RELOAD = "reload"
    RETRY = "retry"
    LOGOUT = "logout"


class DnsInstructions(BaseModel):
    record_type: str = "TXT"
    host: str
    value: str


class GateScreen(BaseModel):
    """A blocking screen, ready to render."""

    code: str
    title: str
    description: str
    details: list[str] = []
    hostname: str | None = None
    dns: DnsInstructions | None = None
    user_email: str | None = None
    tenant_name: str | None = None
    actions: list[GateAction] = []


def verification_host(hostname: str) -> str:
    """Name of the TXT record that proves ownership of ``hostname``."""
    return f"{settings.domain_verify_prefix}.{hostname}"


def dns_instructions(domain: Domain) -> DnsInstructions:
    return DnsInstructions(host=verification_host(domain.hostname), value=domain.verify_token)


# Public storefront screens: (title, description, offers retry)
_PUBLIC_SCREENS: dict[ResolutionError, tuple[str, str, bool]] = {
    ResolutionError.DOMAIN_NOT_FOUND: (
        "Site not found",
        "This address is not linked to any agency.",
        True,
    ),
    ResolutionError.DOMAIN_NOT_VERIFIED: (
        "Site being set up",
        "This site is still being configured. Please come back shortly.",
        True,
    ),
    ResolutionError.WRONG_DOMAIN_TYPE: (
        "Restricted access",
        "This address serves the agency back office, not the public site.",
        False,
    ),
    ResolutionError.TENANT_NOT_FOUND: (
        "Agency not found",
        "The agency linked to this address no longer exists.",
        True,
    ),
    ResolutionError.TENANT_INACTIVE: (
        "Site temporarily unavailable",
        "This agency's site is currently offline.",
        False,
    ),
    ResolutionError.RESOLUTION_ERROR: (
        "Could not load the site",
        "Something went wrong while loading this site.",
        True,
    ),
    ResolutionError.NO_TENANT_AVAILABLE: (
        "No site configured",
        "There is no active agency to show yet.",
        True,
    ),
}

_STATUS_CODES: dict[str, int] = {
    ResolutionError.DOMAIN_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ResolutionError.TENANT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ResolutionError.NO_TENANT_AVAILABLE: status.HTTP_404_NOT_FOUND,
    ResolutionError.DOMAIN_NOT_VERIFIED: status.HTTP_403_FORBIDDEN,
    ResolutionError.WRONG_DOMAIN_TYPE: status.HTTP_403_FORBIDDEN,
    ResolutionError.TENANT_INACTIVE: status.HTTP_403_FORBIDDEN,
    ResolutionError.RESOLUTION_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
    NOT_MEMBER_CODE: status.HTTP_403_FORBIDDEN,
}


def _admin_screen(resolution: TenantResolution) -> GateScreen:
    error = resolution.error
    hostname = resolution.hostname

    if error is ResolutionError.DOMAIN_NOT_FOUND:
        return GateScreen(
            code=error.value,
            title="Admin panel not configured",
            description=f"The domain {hostname} is not linked to any account.",
            details=[
                "Sign in to your main admin panel",
                "Open Settings > Domains",
                f"Add {hostname} as an admin domain",
                "Publish the DNS TXT record shown there and verify it",
            ],
            hostname=hostname,
            actions=[GateAction.RELOAD],
        )

    if error is ResolutionError.DOMAIN_NOT_VERIFIED and resolution.domain is not None:
        return GateScreen(
            code=error.value,
            title="Domain pending verification",
            description=(
                f"Add the TXT record below to the DNS zone of {hostname} "
                "to confirm you own it. DNS changes can take a few minutes."
            ),
            hostname=hostname,
            dns=dns_instructions(resolution.domain),
            actions=[GateAction.RELOAD],
        )

    if error is ResolutionError.TENANT_INACTIVE:
        return GateScreen(
            code=error.value,
            title="Account suspended",
            description="This account is inactive. Contact support to reactivate it.",
            hostname=hostname,
        )

    code = error.value if error else ResolutionError.RESOLUTION_ERROR.value
    return GateScreen(
        code=code,
        title="Unable to load the panel",
        description="An error occurred while identifying the account for this address.",
        details=[f"Code: {code}"],
        hostname=hostname,
        actions=[GateAction.RELOAD],
    )


def _public_screen(resolution: TenantResolution) -> GateScreen:
    error = resolution.error or ResolutionError.RESOLUTION_ERROR
    title, description, retry = _PUBLIC_SCREENS[error]
    return GateScreen(
        code=error.value,
        title=title,
        description=description,
        details=[f"Code: {error.value}"],
        hostname=resolution.hostname,
        actions=[GateAction.RETRY] if retry else [],
    )


def error_screen(resolution: TenantResolution) -> GateScreen:
    """Screen for a failed resolution, by surface."""
    if resolution.domain_type is DomainType.PUBLIC:
        return _public_screen(resolution)
    return _admin_screen(resolution)


def not_member_screen(resolution: TenantResolution, user: Any) -> GateScreen:
    tenant_name = resolution.tenant.name if resolution.tenant else None
    return GateScreen(
        code=NOT_MEMBER_CODE,
        title="Access denied",
        description=(
            f"You are signed in as {user.email}, which has no access to "
            f"{tenant_name}. Sign out and use an account that belongs to this agency."
        ),
        hostname=resolution.hostname,
        user_email=user.email,
        tenant_name=tenant_name,
        actions=[GateAction.LOGOUT],
    )


@dataclass(frozen=True)
class GateOutcome:
    state: GateState
    resolution: TenantResolution
    membership: TenantUser | None = None
    screen: GateScreen | None = None

    @property
    def is_tenant_member(self) -> bool:
        return self.membership is not None

    @property
    def role(self) -> str | None:
        return self.membership.role if self.membership else None

    def to_exception(self) -> TenantGateError:
        """Problem response for a blocked outcome."""
        if self.screen is None:
            raise ValueError("only blocked outcomes convert to an exception")
        return TenantGateError(
            self.screen.description,
            error_code=self.screen.code.lower(),
            status_code=_STATUS_CODES.get(self.screen.code, status.HTTP_403_FORBIDDEN),
            details={"screen": self.screen.model_dump(mode="json", exclude_none=True)},
        )


class AccessGate:
    """Single-use state machine deciding whether a request may proceed."""

    def __init__(self) -> None:
        self._outcome: GateOutcome | None = None

    @property
    def state(self) -> GateState:
        return self._outcome.state if self._outcome else GateState.LOADING

    @property
    def outcome(self) -> GateOutcome | None:
        return self._outcome

    def settle(
        self,
        resolution: TenantResolution,
        user: Any | None = None,
        membership: TenantUser | None = None,
    ) -> GateOutcome:
        """Move out of ``loading``.

        Args:
            resolution: Result of hostname resolution
            user: Signed-in user, or None for anonymous visitors
            membership: The user's membership row for the resolved tenant

        Raises:
            RuntimeError: If the gate already settled
        """
        if self._outcome is not None:
            raise RuntimeError(f"access gate already settled as {self._outcome.state}")

        if not resolution.is_resolved:
            outcome = GateOutcome(
                state=GateState.ERROR,
                resolution=resolution,
                screen=error_screen(resolution),
            )
        elif user is None:
            outcome = GateOutcome(state=GateState.ALLOWED, resolution=resolution)
        elif (
            membership is None
            or resolution.tenant is None
            or membership.tenant_id != resolution.tenant.id
            or membership.user_id != user.id
        ):
            outcome = GateOutcome(
                state=GateState.NOT_MEMBER,
                resolution=resolution,
                screen=not_member_screen(resolution, user),
            )
        else:
            outcome = GateOutcome(
                state=GateState.ALLOWED, resolution=resolution, membership=membership
            )

        self._outcome = outcome
        return outcome
