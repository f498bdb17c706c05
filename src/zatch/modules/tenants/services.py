"""Tenant, domain and membership services."""

from typing import Annotated
from uuid import UUID, uuid4

import structlog
from fastapi import Depends

from zatch.api.dependencies import DBSession
from zatch.core.constants import VERIFY_TOKEN_LENGTH
from zatch.core.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from zatch.core.utils.text import generate_slug
from zatch.modules.tenants.dns import DnsResolver
from zatch.modules.tenants.gate import verification_host
from zatch.modules.tenants.models import (
    Domain,
    DomainType,
    MemberRole,
    Tenant,
    TenantStatus,
    TenantUser,
)
from zatch.modules.tenants.repos import (
    DomainRepository,
    MembershipRepository,
    TenantRepository,
)
from zatch.modules.tenants.schemas import DomainVerificationResponse, TenantUpdate
from zatch.modules.users.repos import UserRepository


logger = structlog.get_logger()


def generate_verify_token() -> str:
    return uuid4().hex[:VERIFY_TOKEN_LENGTH]


def can_manage(actor_role: str | None, target_role: str) -> bool:
    """Owners manage everyone; admins manage agents only."""
    if actor_role == MemberRole.OWNER:
        return True
    if actor_role == MemberRole.ADMIN:
        return target_role == MemberRole.AGENT
    return False


class TenantService:
    """Creating agencies and editing their settings."""

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.tenants = TenantRepository(db)
        self.members = MembershipRepository(db)

    async def create_tenant(
        self,
        name: str,
        owner_id: UUID | None = None,
        slug: str | None = None,
    ) -> Tenant:
        """Create an agency, optionally with its first owner.

        The slug is derived from the name and suffixed until unique.
        """
        base = generate_slug(slug or name) or "agency"
        candidate, suffix = base, 2
        while await self.tenants.slug_exists(candidate):
            candidate = f"{base}-{suffix}"
            suffix += 1

        tenant = await self.tenants.create(
            Tenant(name=name, slug=candidate, status=TenantStatus.ACTIVE.value, settings={})
        )
        if owner_id is not None:
            await self.members.create(
                TenantUser(tenant_id=tenant.id, user_id=owner_id, role=MemberRole.OWNER.value)
            )
        logger.info("tenant_created", tenant_id=str(tenant.id), slug=tenant.slug)
        return tenant

    async def update_tenant(self, tenant: Tenant, data: TenantUpdate) -> Tenant:
        if data.name is not None:
            tenant.name = data.name
        if data.settings is not None:
            tenant.settings = {**(tenant.settings or {}), **data.settings}
        await self.db.flush()
        await self.db.refresh(tenant)
        return tenant

    async def set_status(self, tenant: Tenant, status: TenantStatus) -> Tenant:
        tenant.status = status.value
        await self.db.flush()
        await self.db.refresh(tenant)
        logger.info("tenant_status_changed", tenant_id=str(tenant.id), status=status.value)
        return tenant


class DomainService:
    """Registering hostnames and proving their ownership over DNS."""

    def __init__(self, db: DBSession, dns: DnsResolver) -> None:
        self.repo = DomainRepository(db)
        self.dns = dns

    async def list_domains(self, tenant_id: UUID) -> list[Domain]:
        return await self.repo.list_for_tenant(tenant_id)

    async def get_domain(self, tenant_id: UUID, domain_id: UUID) -> Domain:
        domain = await self.repo.get_for_tenant(tenant_id, domain_id)
        if domain is None:
            raise NotFoundError("Domain not found", resource="domain", resource_id=str(domain_id))
        return domain

    async def add_domain(
        self,
        tenant_id: UUID,
        hostname: str,
        domain_type: DomainType,
        verified: bool = False,
    ) -> Domain:
        """Register a hostname for a tenant. New domains start unverified.

        Raises:
            ConflictError: If the hostname is registered by any tenant
        """
        if await self.repo.get_by_hostname(hostname) is not None:
            raise ConflictError(
                "Hostname already registered",
                error_code="hostname_taken",
                details={"hostname": hostname},
            )

        domain = await self.repo.create(
            Domain(
                tenant_id=tenant_id,
                hostname=hostname,
                type=domain_type.value,
                is_primary=False,
                verified=verified,
                verify_token=generate_verify_token(),
            )
        )
        logger.info(
            "domain_added",
            tenant_id=str(tenant_id),
            hostname=hostname,
            domain_type=domain_type.value,
        )
        return domain

    async def remove_domain(self, tenant_id: UUID, domain_id: UUID) -> None:
        domain = await self.get_domain(tenant_id, domain_id)
        await self.repo.delete(domain)
        logger.info("domain_removed", tenant_id=str(tenant_id), hostname=domain.hostname)

    async def set_primary(self, tenant_id: UUID, domain_id: UUID) -> Domain:
        """Make a verified domain the primary one of its type."""
        domain = await self.get_domain(tenant_id, domain_id)
        if not domain.verified:
            raise BadRequestError(
                "Only verified domains can be primary",
                error_code="domain_not_verified",
            )
        await self.repo.clear_primary(tenant_id, domain.type)
        domain.is_primary = True
        return await self.repo.update(domain)

    async def verify(self, domain: Domain) -> DomainVerificationResponse:
        """Look for the verify token in the domain's TXT record."""
        expected_host = verification_host(domain.hostname)

        if domain.verified:
            return DomainVerificationResponse(
                ok=True,
                verified=True,
                message="Domain already verified",
                hostname=domain.hostname,
                expected_host=expected_host,
                expected_value=domain.verify_token,
            )

        records = await self.dns.txt_records(expected_host)
        if any(domain.verify_token in record for record in records):
            domain.verified = True
            await self.repo.update(domain)
            logger.info("domain_verified", hostname=domain.hostname)
            return DomainVerificationResponse(
                ok=True,
                verified=True,
                message="Domain verified",
                hostname=domain.hostname,
                expected_host=expected_host,
                expected_value=domain.verify_token,
                found_records=records,
            )

        return DomainVerificationResponse(
            ok=False,
            verified=False,
            message="Verification record not found. DNS changes can take a while to propagate.",
            hostname=domain.hostname,
            expected_host=expected_host,
            expected_value=domain.verify_token,
            found_records=records,
        )

    async def verify_by_hostname(self, hostname: str) -> DomainVerificationResponse:
        domain = await self.repo.get_by_hostname(hostname.strip().lower())
        if domain is None:
            raise NotFoundError("Domain not found", resource="domain", resource_id=hostname)
        return await self.verify(domain)

    async def verify_pending(self, limit: int = 100) -> int:
        """Re-check every unverified domain.

        Returns:
            Number of domains that became verified
        """
        verified = 0
        for domain in await self.repo.list_unverified(limit):
            result = await self.verify(domain)
            verified += int(result.verified)
        return verified


class MembershipService:
    """Who belongs to an agency, and with which role."""

    def __init__(self, db: DBSession) -> None:
        self.repo = MembershipRepository(db)
        self.users = UserRepository(db)

    async def list_members(self, tenant_id: UUID) -> list[TenantUser]:
        return await self.repo.list_for_tenant(tenant_id)

    async def _get(self, tenant_id: UUID, membership_id: UUID) -> TenantUser:
        membership = await self.repo.get_by_id(tenant_id, membership_id)
        if membership is None:
            raise NotFoundError(
                "Member not found",
                resource="member",
                resource_id=str(membership_id),
            )
        return membership

    def _ensure_can_manage(self, actor: TenantUser, target_role: str) -> None:
        if not can_manage(actor.role, target_role):
            raise ForbiddenError(
                f"A {actor.role} cannot manage {target_role} members",
                error_code="member_management_denied",
            )

    async def _ensure_other_owner(self, tenant_id: UUID) -> None:
        if await self.repo.count_role(tenant_id, MemberRole.OWNER.value) <= 1:
            raise BadRequestError(
                "An agency must keep at least one owner",
                error_code="last_owner",
            )

    async def add_member(
        self,
        actor: TenantUser,
        email: str,
        role: MemberRole,
    ) -> TenantUser:
        """Give an existing user access to the actor's tenant.

        Raises:
            NotFoundError: If no account uses ``email``
            ConflictError: If the user already belongs to the tenant
        """
        self._ensure_can_manage(actor, role.value)

        user = await self.users.get_by_email(email)
        if user is None:
            raise NotFoundError(
                "No account found for this email. The user must sign up first.",
                resource="user",
                resource_id=email,
            )

        if await self.repo.get(actor.tenant_id, user.id) is not None:
            raise ConflictError(
                "User is already a member of this agency",
                error_code="already_member",
                details={"email": email},
            )

        membership = await self.repo.create(
            TenantUser(tenant_id=actor.tenant_id, user_id=user.id, role=role.value)
        )
        logger.info(
            "member_added",
            tenant_id=str(actor.tenant_id),
            user_id=str(user.id),
            role=role.value,
        )
        return membership

    async def change_role(
        self,
        actor: TenantUser,
        membership_id: UUID,
        role: MemberRole,
    ) -> TenantUser:
        membership = await self._get(actor.tenant_id, membership_id)
        self._ensure_can_manage(actor, membership.role)
        self._ensure_can_manage(actor, role.value)

        if membership.role == MemberRole.OWNER and role is not MemberRole.OWNER:
            await self._ensure_other_owner(actor.tenant_id)

        membership.role = role.value
        membership = await self.repo.update(membership)
        logger.info(
            "member_role_changed",
            tenant_id=str(actor.tenant_id),
            user_id=str(membership.user_id),
            role=role.value,
        )
        return membership

    async def remove_member(self, actor: TenantUser, membership_id: UUID) -> None:
        membership = await self._get(actor.tenant_id, membership_id)
        self._ensure_can_manage(actor, membership.role)

        if membership.role == MemberRole.OWNER:
            await self._ensure_other_owner(actor.tenant_id)

        await self.repo.delete(membership)
        logger.info(
            "member_removed",
            tenant_id=str(actor.tenant_id),
            user_id=str(membership.user_id),
        )


# Type aliases for dependency injection
TenantSvc = Annotated[TenantService, Depends(TenantService)]
DomainSvc = Annotated[DomainService, Depends(DomainService)]
MembershipSvc = Annotated[MembershipService, Depends(MembershipService)]
