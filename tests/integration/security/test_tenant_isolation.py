"""Integration tests for multi-tenancy isolation at the data layer.

Tenant-owned rows are only reachable through ``TenantSession``; these tests
check that every lookup path filters on the session's tenant.
"""

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zatch.core.database.tenant import TenantSession
from zatch.modules.messages.models import ContactMessage
from zatch.modules.properties.models import Property
from zatch.modules.properties.repos import PropertyRepository
from zatch.modules.properties.schemas import PropertyFilters
from zatch.modules.tenants.models import Tenant


pytestmark = pytest.mark.integration


class TestTenantIsolation:
    """Tests for multi-tenant data isolation."""

    @pytest.fixture
    async def tenant_a(self, db: AsyncSession) -> Tenant:
        tenant = Tenant(name="Agência A", slug="agencia-a", status="active", settings={})
        db.add(tenant)
        await db.flush()
        return tenant

    @pytest.fixture
    async def tenant_b(self, db: AsyncSession) -> Tenant:
        tenant = Tenant(name="Agência B", slug="agencia-b", status="active", settings={})
        db.add(tenant)
        await db.flush()
        return tenant

    @pytest.fixture
    async def property_a(self, db: AsyncSession, tenant_a: Tenant) -> Property:
        scoped = TenantSession(db, tenant_a.id)
        prop = Property(
            title="Casa da Agência A",
            slug="casa-centro",
            address_city="Florianópolis",
            address_state="SC",
            reference="A-1",
        )
        scoped.add(prop)
        await scoped.flush()
        return prop

    async def test_add_stamps_the_session_tenant(self, property_a: Property, tenant_a: Tenant):
        assert property_a.tenant_id == tenant_a.id

    async def test_get_hides_foreign_rows(
        self, db: AsyncSession, property_a: Property, tenant_b: Tenant
    ):
        scoped = TenantSession(db, tenant_b.id)

        assert await scoped.get(Property, property_a.id) is None

    async def test_select_is_scoped(
        self, db: AsyncSession, property_a: Property, tenant_b: Tenant
    ):
        scoped = TenantSession(db, tenant_b.id)

        assert await scoped.scalars(select(Property)) == []

    async def test_repository_lookups_are_scoped(
        self, db: AsyncSession, property_a: Property, tenant_a: Tenant, tenant_b: Tenant
    ):
        repo_a = PropertyRepository(TenantSession(db, tenant_a.id))
        repo_b = PropertyRepository(TenantSession(db, tenant_b.id))

        assert await repo_a.get_by_slug("casa-centro") is not None
        assert await repo_b.get_by_slug("casa-centro") is None
        assert await repo_b.get_by_reference("A-1") is None
        assert await repo_b.get_by_id(property_a.id) is None

        items, total = await repo_b.search(PropertyFilters())
        assert (items, total) == ([], 0)
        assert (await repo_b.stats())["total"] == 0

    async def test_same_slug_in_two_tenants(
        self, db: AsyncSession, property_a: Property, tenant_b: Tenant
    ):
        scoped = TenantSession(db, tenant_b.id)
        scoped.add(
            Property(
                title="Casa da Agência B",
                slug="casa-centro",
                address_city="Curitiba",
                address_state="PR",
            )
        )
        await scoped.flush()

        repo_b = PropertyRepository(scoped)
        found = await repo_b.get_by_slug("casa-centro")
        assert found.title == "Casa da Agência B"

    async def test_counter_increment_is_scoped(
        self, db: AsyncSession, property_a: Property, tenant_b: Tenant
    ):
        await PropertyRepository(TenantSession(db, tenant_b.id)).increment(property_a, "views")

        assert property_a.views == 0

    async def test_messages_are_scoped(
        self, db: AsyncSession, tenant_a: Tenant, tenant_b: Tenant
    ):
        TenantSession(db, tenant_a.id).add(
            ContactMessage(name="Ana", email="ana@example.com", message="Olá")
        )
        await db.flush()

        assert await TenantSession(db, tenant_b.id).scalars(select(ContactMessage)) == []
        assert len(await TenantSession(db, tenant_a.id).scalars(select(ContactMessage))) == 1
