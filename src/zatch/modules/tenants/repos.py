"""Tenant, domain and membership repositories."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, select, update

from zatch.api.dependencies import DBSession
from zatch.modules.tenants.models import Domain, Tenant, TenantStatus, TenantUser


class TenantRepository:
    """Repository for Tenant database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, tenant: Tenant) -> Tenant:
        self.session.add(tenant)
        await self.session.flush()
        await self.session.refresh(tenant)
        return tenant

    async def get_by_id(self, tenant_id: UUID) -> Tenant | None:
        return await self.session.get(Tenant, tenant_id)

    async def get_by_slug(self, slug: str) -> Tenant | None:
        result = await self.session.execute(select(Tenant).where(Tenant.slug == slug))
        return result.scalar_one_or_none()

    async def first_active(self) -> Tenant | None:
        """Oldest active tenant, used by the development fallback."""
        stmt = (
            select(Tenant)
            .where(Tenant.status == TenantStatus.ACTIVE.value)
            .order_by(Tenant.created_at, Tenant.slug)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def slug_exists(self, slug: str) -> bool:
        stmt = select(func.count()).select_from(Tenant).where(Tenant.slug == slug)
        result = await self.session.execute(stmt)
        return result.scalar_one() > 0

    async def list_all(self) -> list[Tenant]:
        result = await self.session.execute(select(Tenant).order_by(Tenant.name))
        return list(result.scalars().all())


class DomainRepository:
    """Repository for Domain database operations.

    Lookups by hostname are global: they run before any tenant is known.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, domain: Domain) -> Domain:
        self.session.add(domain)
        await self.session.flush()
        await self.session.refresh(domain)
        return domain

    async def get_by_hostname(
        self, hostname: str, domain_type: str | None = None
    ) -> Domain | None:
        """Find a domain by exact hostname, optionally restricted to a type."""
        stmt = select(Domain).where(Domain.hostname == hostname)
        if domain_type is not None:
            stmt = stmt.where(Domain.type == domain_type)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_tenant(self, tenant_id: UUID, domain_id: UUID) -> Domain | None:
        stmt = select(Domain).where(Domain.id == domain_id, Domain.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_tenant(self, tenant_id: UUID) -> list[Domain]:
        stmt = (
            select(Domain)
            .where(Domain.tenant_id == tenant_id)
            .order_by(Domain.type, Domain.is_primary.desc(), Domain.hostname)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_unverified(self, limit: int = 100) -> list[Domain]:
        stmt = (
            select(Domain)
            .where(Domain.verified == False)  # noqa: E712
            .order_by(Domain.created_at)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def primary_for_tenant(self, tenant_id: UUID, domain_type: str) -> Domain | None:
        """The tenant's primary verified domain of a type, or any verified one."""
        stmt = (
            select(Domain)
            .where(
                Domain.tenant_id == tenant_id,
                Domain.type == domain_type,
                Domain.verified == True,  # noqa: E712
            )
            .order_by(Domain.is_primary.desc(), Domain.created_at)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def clear_primary(self, tenant_id: UUID, domain_type: str) -> None:
        stmt = (
            update(Domain)
            .where(Domain.tenant_id == tenant_id, Domain.type == domain_type)
            .values(is_primary=False)
        )
        await self.session.execute(stmt)

    async def update(self, domain: Domain) -> Domain:
        await self.session.flush()
        await self.session.refresh(domain)
        return domain

    async def delete(self, domain: Domain) -> None:
        await self.session.delete(domain)
        await self.session.flush()


class MembershipRepository:
    """Repository for TenantUser (membership) rows."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, membership: TenantUser) -> TenantUser:
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def get(self, tenant_id: UUID, user_id: UUID) -> TenantUser | None:
        """Membership of ``user_id`` in ``tenant_id``, if any."""
        stmt = select(TenantUser).where(
            TenantUser.tenant_id == tenant_id,
            TenantUser.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, tenant_id: UUID, membership_id: UUID) -> TenantUser | None:
        stmt = select(TenantUser).where(
            TenantUser.tenant_id == tenant_id,
            TenantUser.id == membership_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_tenant(self, tenant_id: UUID) -> list[TenantUser]:
        stmt = (
            select(TenantUser)
            .where(TenantUser.tenant_id == tenant_id)
            .order_by(TenantUser.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_role(self, tenant_id: UUID, role: str) -> int:
        stmt = (
            select(func.count())
            .select_from(TenantUser)
            .where(TenantUser.tenant_id == tenant_id, TenantUser.role == role)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def update(self, membership: TenantUser) -> TenantUser:
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def delete(self, membership: TenantUser) -> None:
        await self.session.delete(membership)
        await self.session.flush()


# Type aliases for dependency injection
TenantRepo = Annotated[TenantRepository, Depends(TenantRepository)]
DomainRepo = Annotated[DomainRepository, Depends(DomainRepository)]
MembershipRepo = Annotated[MembershipRepository, Depends(MembershipRepository)]
