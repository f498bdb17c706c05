"""Hostname to tenant resolution.

``TenantResolver.resolve`` maps the hostname a request was addressed to onto
a tenant through the domains table. It never raises: every outcome is a
``TenantResolution`` that either carries the tenant or one of the closed set
of ``ResolutionError`` codes, which the access gate turns into a screen.

Lookup order:

1. domain by exact hostname and type
2. on a miss, domain by hostname alone (a hit means the wrong surface)
3. domain must be verified
4. owning tenant must exist and be active

On development hostnames (``localhost`` by default) in the development
environment the domains table is bypassed: the tenant id remembered in the
``active_tenant_id`` cookie is used, then the oldest active tenant.
"""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from zatch.config import settings
from zatch.core.utils.hosts import normalize_hostname
from zatch.modules.tenants.models import Domain, DomainType, Tenant
from zatch.modules.tenants.repos import DomainRepository, TenantRepository


logger = structlog.get_logger()


class ResolutionError(StrEnum):
    DOMAIN_NOT_FOUND = "DOMAIN_NOT_FOUND"
    DOMAIN_NOT_VERIFIED = "DOMAIN_NOT_VERIFIED"
    WRONG_DOMAIN_TYPE = "WRONG_DOMAIN_TYPE"
    TENANT_NOT_FOUND = "TENANT_NOT_FOUND"
    TENANT_INACTIVE = "TENANT_INACTIVE"
    RESOLUTION_ERROR = "RESOLUTION_ERROR"
    NO_TENANT_AVAILABLE = "NO_TENANT_AVAILABLE"


@dataclass(frozen=True)
class TenantResolution:
    """Outcome of resolving a hostname.

    Exactly one of ``tenant`` and ``error`` is set. ``domain`` is kept on
    ``DOMAIN_NOT_VERIFIED`` failures so the DNS instructions can be shown.
    """

    hostname: str
    domain_type: DomainType
    tenant: Tenant | None = None
    domain: Domain | None = None
    error: ResolutionError | None = None

    @property
    def is_resolved(self) -> bool:
        return self.tenant is not None and self.error is None

    @classmethod
    def failure(
        cls,
        hostname: str,
        domain_type: DomainType,
        error: ResolutionError,
        domain: Domain | None = None,
    ) -> "TenantResolution":
        return cls(hostname=hostname, domain_type=domain_type, domain=domain, error=error)


def is_development_host(hostname: str) -> bool:
    """Whether ``hostname`` takes the development fallback path."""
    return settings.is_development and hostname in settings.dev_hostnames


class TenantResolver:
    """Resolves hostnames to tenants. One instance per request."""

    def __init__(self, session: AsyncSession) -> None:
        self.domains = DomainRepository(session)
        self.tenants = TenantRepository(session)

    async def resolve(
        self,
        hostname: str,
        domain_type: DomainType = DomainType.ADMIN,
        stored_tenant_id: str | None = None,
    ) -> TenantResolution:
        """Resolve ``hostname`` for the given surface.

        Args:
            hostname: Host the client addressed, in any case, with or without port
            domain_type: Surface being served (admin back office or public site)
            stored_tenant_id: Tenant id remembered from a previous resolution;
                only consulted on development hostnames

        Returns:
            A resolved ``TenantResolution`` or one carrying a ``ResolutionError``
        """
        host = normalize_hostname(hostname)
        try:
            if is_development_host(host):
                resolution = await self._resolve_development(
                    host, domain_type, stored_tenant_id
                )
            else:
                resolution = await self._resolve_domain(host, domain_type)
        except Exception:
            logger.exception("tenant_resolution_failed", hostname=host)
            return TenantResolution.failure(
                host, domain_type, ResolutionError.RESOLUTION_ERROR
            )

        if resolution.is_resolved:
            logger.debug(
                "tenant_resolved",
                hostname=host,
                domain_type=domain_type.value,
                tenant_id=str(resolution.tenant.id),  # type: ignore[union-attr]
            )
        else:
            logger.info(
                "tenant_resolution_rejected",
                hostname=host,
                domain_type=domain_type.value,
                error=resolution.error,
            )
        return resolution

    async def _resolve_domain(
        self, hostname: str, domain_type: DomainType
    ) -> TenantResolution:
        domain = await self.domains.get_by_hostname(hostname, domain_type.value)
        if domain is None:
            other = await self.domains.get_by_hostname(hostname)
            error = (
                ResolutionError.WRONG_DOMAIN_TYPE
                if other is not None
                else ResolutionError.DOMAIN_NOT_FOUND
            )
            return TenantResolution.failure(hostname, domain_type, error)

        if not domain.verified:
            return TenantResolution.failure(
                hostname, domain_type, ResolutionError.DOMAIN_NOT_VERIFIED, domain=domain
            )

        tenant = await self.tenants.get_by_id(domain.tenant_id)
        if tenant is None:
            return TenantResolution.failure(
                hostname, domain_type, ResolutionError.TENANT_NOT_FOUND, domain=domain
            )
        if not tenant.is_active:
            return TenantResolution.failure(
                hostname, domain_type, ResolutionError.TENANT_INACTIVE, domain=domain
            )

        return TenantResolution(
            hostname=hostname, domain_type=domain_type, tenant=tenant, domain=domain
        )

    async def _resolve_development(
        self,
        hostname: str,
        domain_type: DomainType,
        stored_tenant_id: str | None,
    ) -> TenantResolution:
        tenant: Tenant | None = None
        if stored_tenant_id:
            try:
                tenant = await self.tenants.get_by_id(UUID(stored_tenant_id))
            except ValueError:
                tenant = None
            if tenant is not None and not tenant.is_active:
                tenant = None

        if tenant is None:
            tenant = await self.tenants.first_active()

        if tenant is None:
            return TenantResolution.failure(
                hostname, domain_type, ResolutionError.NO_TENANT_AVAILABLE
            )
        return TenantResolution(hostname=hostname, domain_type=domain_type, tenant=tenant)
