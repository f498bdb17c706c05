"""Integration tests for back-office property management."""

import pytest
from httpx import AsyncClient

from tests.conftest import add_membership, create_user, make_client
from tests.factories import PropertyCreateFactory
from zatch.core.auth import create_access_token
from zatch.modules.tenants.models import Domain, Tenant


pytestmark = pytest.mark.integration


def property_payload(**overrides) -> dict:
    return PropertyCreateFactory.build(**overrides).model_dump(mode="json")


async def create_property(client: AsyncClient, **overrides) -> dict:
    response = await client.post("/api/v1/properties", json=property_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


class TestPropertyCrud:
    async def test_create_property(self, owner_client: AsyncClient):
        response = await owner_client.post(
            "/api/v1/properties",
            json=property_payload(
                title="Apartamento São João",
                type="apartamento",
                price=480000,
                images=[{"url": "https://cdn.example.com/1.jpg", "alt": "Sala"}],
            ),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["slug"] == "apartamento-sao-joao"
        assert data["views"] == 0
        assert data["images"][0]["order_index"] == 0

    async def test_duplicate_titles_get_distinct_slugs(self, owner_client: AsyncClient):
        first = await create_property(owner_client, title="Casa no Campeche")
        second = await create_property(owner_client, title="Casa no Campeche")

        assert first["slug"] == "casa-no-campeche"
        assert second["slug"] == "casa-no-campeche-2"

    async def test_invalid_payload(self, owner_client: AsyncClient):
        response = await owner_client.post(
            "/api/v1/properties", json={"title": "", "price": -1}
        )

        assert response.status_code == 422
        fields = {error["field"] for error in response.json()["errors"]}
        assert {"title", "price"} <= fields

    async def test_list_with_filters(self, owner_client: AsyncClient):
        await create_property(owner_client, status="venda", price=300000)
        await create_property(owner_client, status="aluguel", price=2500)
        await create_property(owner_client, status="venda", price=900000)

        response = await owner_client.get(
            "/api/v1/properties", params={"status": "venda", "max_price": 500000}
        )

        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["price"] == 300000

    async def test_pagination(self, owner_client: AsyncClient):
        for _ in range(3):
            await create_property(owner_client)

        response = await owner_client.get("/api/v1/properties", params={"page": 2, "page_size": 2})

        data = response.json()
        assert data["total"] == 3
        assert data["page"] == 2
        assert len(data["items"]) == 1

    async def test_update_property(self, owner_client: AsyncClient):
        created = await create_property(owner_client, featured=False)

        response = await owner_client.patch(
            f"/api/v1/properties/{created['id']}",
            json={"featured": True, "price": 999000},
        )

        data = response.json()
        assert data["featured"] is True
        assert data["price"] == 999000
        assert data["title"] == created["title"]

    async def test_replace_images(self, owner_client: AsyncClient):
        created = await create_property(
            owner_client, images=[{"url": "https://cdn.example.com/old.jpg"}]
        )

        response = await owner_client.put(
            f"/api/v1/properties/{created['id']}/images",
            json={
                "images": [
                    {"url": "https://cdn.example.com/a.jpg"},
                    {"url": "https://cdn.example.com/b.jpg"},
                ]
            },
        )

        images = response.json()["images"]
        assert [image["url"] for image in images] == [
            "https://cdn.example.com/a.jpg",
            "https://cdn.example.com/b.jpg",
        ]
        assert [image["order_index"] for image in images] == [0, 1]

    async def test_delete_property(self, owner_client: AsyncClient):
        created = await create_property(owner_client)

        response = await owner_client.delete(f"/api/v1/properties/{created['id']}")
        assert response.status_code == 204

        missing = await owner_client.get(f"/api/v1/properties/{created['id']}")
        assert missing.status_code == 404


class TestAgentPermissions:
    async def test_agent_can_create_and_edit(self, agent_client: AsyncClient):
        created = await create_property(agent_client)

        response = await agent_client.patch(
            f"/api/v1/properties/{created['id']}", json={"bedrooms": 4}
        )

        assert response.status_code == 200

    async def test_agent_cannot_delete(self, agent_client: AsyncClient):
        created = await create_property(agent_client)

        response = await agent_client.delete(f"/api/v1/properties/{created['id']}")

        assert response.status_code == 403
        data = response.json()
        assert data["code"] == "permission_denied"
        assert data["page_key"] == "properties"
        assert data["action"] == "delete"


class TestTenantIsolation:
    """Listings of one agency are invisible from another agency's hostname."""

    @pytest.fixture
    async def rival_client(self, app, db, permissions):
        rival = Tenant(name="Rival Imóveis", slug="rival", status="active", settings={})
        db.add(rival)
        await db.flush()
        db.add(
            Domain(
                tenant_id=rival.id,
                hostname="painel.rival.com.br",
                type="admin",
                is_primary=True,
                verified=True,
                verify_token="r" * 32,
            )
        )
        user = await create_user(db, "dono@rival.com.br", "Dono Rival")
        await add_membership(db, rival, user, "owner")

        async with make_client(app, "painel.rival.com.br", create_access_token(user.id)) as client:
            yield client

    async def test_list_is_scoped(self, owner_client: AsyncClient, rival_client: AsyncClient):
        await create_property(owner_client, title="Casa da Horizonte")

        response = await rival_client.get("/api/v1/properties")

        assert response.json()["total"] == 0

    async def test_foreign_id_is_not_found(
        self, owner_client: AsyncClient, rival_client: AsyncClient
    ):
        created = await create_property(owner_client)

        assert (await rival_client.get(f"/api/v1/properties/{created['id']}")).status_code == 404
        assert (
            await rival_client.delete(f"/api/v1/properties/{created['id']}")
        ).status_code == 404

    async def test_token_does_not_cross_hostnames(self, app, owner, rival_client):
        async with make_client(app, "painel.rival.com.br", create_access_token(owner.id)) as client:
            response = await client.get("/api/v1/properties")

        assert response.status_code == 403
        assert response.json()["code"] == "not_member"
