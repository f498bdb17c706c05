"""Integration tests for hostname resolution and the access gate over HTTP."""

import pytest
from httpx import AsyncClient

from tests.conftest import ADMIN_HOST, make_client
from zatch.core.auth import create_access_token
from zatch.modules.tenants.models import Domain


pytestmark = pytest.mark.integration


class TestContextEndpoint:
    """GET /api/v1/tenant/context never fails; it reports the gate outcome."""

    async def test_anonymous_on_verified_admin_domain(
        self, client: AsyncClient, tenant, admin_domain
    ):
        response = await client.get("/api/v1/tenant/context")

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "allowed"
        assert data["hostname"] == ADMIN_HOST
        assert data["tenant"]["slug"] == "horizonte"
        assert data["is_tenant_member"] is False
        assert data["role"] is None
        assert data["screen"] is None

    async def test_successful_resolution_sets_tenant_cookie(
        self, client: AsyncClient, tenant, admin_domain
    ):
        response = await client.get("/api/v1/tenant/context")

        assert response.cookies.get("active_tenant_id") == str(tenant.id)

    async def test_member_gets_role_and_permissions(
        self, agent_client: AsyncClient, tenant
    ):
        response = await agent_client.get("/api/v1/tenant/context")

        data = response.json()
        assert data["state"] == "allowed"
        assert data["role"] == "agent"
        assert data["is_tenant_member"] is True
        assert data["permissions"]["properties"]["can_create"] is True
        assert data["permissions"]["properties"]["can_delete"] is False
        assert data["permissions"]["users"]["can_view"] is False

    async def test_owner_has_full_access(self, owner_client: AsyncClient):
        response = await owner_client.get("/api/v1/tenant/context")

        permissions = response.json()["permissions"]
        assert all(all(cell.values()) for cell in permissions.values())

    async def test_signed_in_outsider_is_not_member(
        self, app, outsider, admin_domain
    ):
        async with make_client(app, ADMIN_HOST, create_access_token(outsider.id)) as client:
            response = await client.get("/api/v1/tenant/context")

        data = response.json()
        assert data["state"] == "not_member"
        assert data["is_tenant_member"] is False
        assert data["screen"]["code"] == "NOT_MEMBER"
        assert data["screen"]["user_email"] == "outsider@example.com"
        assert data["screen"]["tenant_name"] == "Imobiliária Horizonte"
        assert data["screen"]["actions"] == ["logout"]

    async def test_unknown_hostname(self, app, tenant):
        async with make_client(app, "unknown.example.org") as client:
            response = await client.get("/api/v1/tenant/context")

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "error"
        assert data["tenant"] is None
        assert data["screen"]["code"] == "DOMAIN_NOT_FOUND"
        assert "unknown.example.org" in data["screen"]["details"][2]

    async def test_unverified_domain_shows_dns_record(self, client: AsyncClient, db, tenant):
        db.add(
            Domain(
                tenant_id=tenant.id,
                hostname=ADMIN_HOST,
                type="admin",
                is_primary=False,
                verified=False,
                verify_token="c" * 32,
            )
        )
        await db.flush()

        response = await client.get("/api/v1/tenant/context")

        data = response.json()
        assert data["state"] == "error"
        assert data["screen"]["code"] == "DOMAIN_NOT_VERIFIED"
        assert data["screen"]["dns"] == {
            "record_type": "TXT",
            "host": f"_zatch-verify.{ADMIN_HOST}",
            "value": "c" * 32,
        }
        assert data["domain"]["verified"] is False

    async def test_public_domain_on_admin_surface(
        self, public_client: AsyncClient, public_domain
    ):
        response = await public_client.get("/api/v1/tenant/context")

        assert response.json()["screen"]["code"] == "WRONG_DOMAIN_TYPE"

    async def test_public_surface_query(self, public_client: AsyncClient, public_domain):
        response = await public_client.get("/api/v1/tenant/context", params={"type": "public"})

        data = response.json()
        assert data["state"] == "allowed"
        assert data["domain_type"] == "public"

    async def test_inactive_tenant(self, client: AsyncClient, db, tenant, admin_domain):
        tenant.status = "inactive"
        await db.flush()

        response = await client.get("/api/v1/tenant/context")

        assert response.json()["screen"]["code"] == "TENANT_INACTIVE"

    async def test_port_and_case_are_ignored(self, app, tenant, admin_domain):
        async with make_client(app, "PAINEL.example.com:8443") as client:
            response = await client.get("/api/v1/tenant/context")

        assert response.json()["state"] == "allowed"

    async def test_forwarded_host_wins(self, app, tenant, admin_domain):
        async with make_client(app, "internal.svc.local") as client:
            response = await client.get(
                "/api/v1/tenant/context",
                headers={"X-Forwarded-Host": ADMIN_HOST},
            )

        assert response.json()["state"] == "allowed"


class TestGateOnTenantRoutes:
    """Tenant-scoped routes turn blocked outcomes into problem responses."""

    async def test_unknown_hostname_is_404(self, app, tenant, owner):
        async with make_client(app, "nowhere.example.org", create_access_token(owner.id)) as client:
            response = await client.get("/api/v1/properties")

        assert response.status_code == 404
        data = response.json()
        assert data["code"] == "domain_not_found"
        assert data["screen"]["code"] == "DOMAIN_NOT_FOUND"

    async def test_unverified_domain_is_403(self, app, db, tenant, owner):
        db.add(
            Domain(
                tenant_id=tenant.id,
                hostname="novo.example.com",
                type="admin",
                is_primary=False,
                verified=False,
                verify_token="d" * 32,
            )
        )
        await db.flush()

        async with make_client(app, "novo.example.com", create_access_token(owner.id)) as client:
            response = await client.get("/api/v1/properties")

        assert response.status_code == 403
        assert response.json()["code"] == "domain_not_verified"

    async def test_outsider_is_403(self, app, outsider, admin_domain, permissions):
        async with make_client(app, ADMIN_HOST, create_access_token(outsider.id)) as client:
            response = await client.get("/api/v1/properties")

        assert response.status_code == 403
        assert response.json()["code"] == "not_member"

    async def test_anonymous_caller_is_401(self, client: AsyncClient, admin_domain):
        response = await client.get("/api/v1/properties")

        assert response.status_code == 401
        assert response.json()["code"] == "auth_required"

    async def test_storefront_on_unknown_host_offers_retry(self, app, tenant):
        async with make_client(app, "loja.example.org") as client:
            response = await client.get("/api/v1/public/properties")

        assert response.status_code == 404
        screen = response.json()["screen"]
        assert screen["title"] == "Site not found"
        assert screen["actions"] == ["retry"]


class TestTenantCookie:
    """The ``active_tenant_id`` cookie follows every resolution outcome."""

    @staticmethod
    def cleared(response) -> bool:
        return any(
            header.startswith("active_tenant_id=") and "Max-Age=0" in header
            for header in response.headers.get_list("set-cookie")
        )

    async def test_gate_error_clears_stale_cookie(self, app, tenant, owner):
        async with make_client(app, "unknown.example.org", create_access_token(owner.id)) as client:
            response = await client.get(
                "/api/v1/tenant", headers={"Cookie": f"active_tenant_id={tenant.id}"}
            )

        assert response.status_code == 404
        assert self.cleared(response)

    async def test_context_endpoint_clears_stale_cookie(self, app, tenant):
        async with make_client(app, "unknown.example.org") as client:
            response = await client.get(
                "/api/v1/tenant/context", headers={"Cookie": f"active_tenant_id={tenant.id}"}
            )

        assert response.json()["state"] == "error"
        assert self.cleared(response)

    async def test_failed_resolution_without_cookie_sets_nothing(self, app, tenant):
        async with make_client(app, "unknown.example.org") as client:
            response = await client.get("/api/v1/public/properties")

        assert response.status_code == 404
        assert response.headers.get_list("set-cookie") == []

    async def test_plain_response_routes_remember_tenant(
        self, public_client: AsyncClient, tenant, public_domain
    ):
        response = await public_client.get("/sitemap.xml")

        assert response.status_code == 200
        assert response.cookies.get("active_tenant_id") == str(tenant.id)

    async def test_matching_cookie_is_not_rewritten(
        self, client: AsyncClient, tenant, admin_domain
    ):
        response = await client.get(
            "/api/v1/tenant/context", headers={"Cookie": f"active_tenant_id={tenant.id}"}
        )

        assert response.json()["state"] == "allowed"
        assert response.headers.get_list("set-cookie") == []
