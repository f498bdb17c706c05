"""Integration tests for the public storefront endpoints."""

import pytest
from httpx import AsyncClient

from tests.integration.api.test_properties import create_property


pytestmark = pytest.mark.integration


@pytest.fixture
async def listings(owner_client: AsyncClient, public_domain) -> dict[str, dict]:
    return {
        "casa": await create_property(
            owner_client,
            title="Casa em Jurerê",
            type="casa",
            bedrooms=4,
            images=[{"url": "https://cdn.example.com/casa.jpg"}],
        ),
        "apto": await create_property(
            owner_client, title="Apartamento Centro", type="apartamento", bedrooms=2
        ),
        "inativo": await create_property(owner_client, title="Casa Antiga", active=False),
    }


class TestPublicCatalogue:
    async def test_search_hides_inactive(self, public_client: AsyncClient, listings):
        response = await public_client.get("/api/v1/public/properties")

        titles = {item["title"] for item in response.json()["items"]}
        assert titles == {"Casa em Jurerê", "Apartamento Centro"}

    async def test_cannot_ask_for_inactive(self, public_client: AsyncClient, listings):
        response = await public_client.get("/api/v1/public/properties", params={"active": False})

        assert response.json()["total"] == 2

    async def test_search_filters(self, public_client: AsyncClient, listings):
        response = await public_client.get(
            "/api/v1/public/properties", params={"min_bedrooms": 3}
        )

        assert [item["title"] for item in response.json()["items"]] == ["Casa em Jurerê"]

    async def test_detail_counts_views(self, public_client: AsyncClient, listings):
        await public_client.get("/api/v1/public/properties/casa-em-jurere")
        response = await public_client.get("/api/v1/public/properties/casa-em-jurere")

        assert response.status_code == 200
        assert response.json()["views"] == 2

    async def test_inactive_detail_is_not_found(self, public_client: AsyncClient, listings):
        response = await public_client.get("/api/v1/public/properties/casa-antiga")

        assert response.status_code == 404

    async def test_admin_hostname_is_wrong_surface(self, client: AsyncClient, listings):
        response = await client.get("/api/v1/public/properties")

        assert response.status_code == 403
        assert response.json()["code"] == "wrong_domain_type"

    async def test_public_site_config_defaults_to_agency_name(
        self, public_client: AsyncClient, public_domain
    ):
        response = await public_client.get("/api/v1/public/site-config")

        assert response.json()["seo_title"] == "Imobiliária Horizonte"


class TestContactMessages:
    async def test_visitor_message_reaches_back_office(
        self, public_client: AsyncClient, owner_client: AsyncClient, listings
    ):
        response = await public_client.post(
            "/api/v1/public/messages",
            json={
                "name": "Maria Silva",
                "email": "maria@example.com",
                "phone": "48 99999-0000",
                "message": "Gostaria de agendar uma visita.",
                "property_id": listings["casa"]["id"],
            },
        )
        assert response.status_code == 201
        assert response.json()["read"] is False

        unread = await owner_client.get("/api/v1/messages/unread-count")
        assert unread.json() == {"unread": 1}

        inbox = await owner_client.get("/api/v1/messages")
        assert inbox.json()[0]["property_id"] == listings["casa"]["id"]

    async def test_unknown_property_is_dropped(self, public_client: AsyncClient, public_domain):
        response = await public_client.post(
            "/api/v1/public/messages",
            json={
                "name": "João",
                "email": "joao@example.com",
                "message": "Olá",
                "property_id": "00000000-0000-0000-0000-000000000000",
            },
        )

        assert response.status_code == 201
        assert response.json()["property_id"] is None

    async def test_mark_read_and_delete(
        self, public_client: AsyncClient, owner_client: AsyncClient, public_domain
    ):
        sent = await public_client.post(
            "/api/v1/public/messages",
            json={"name": "Ana", "email": "ana@example.com", "message": "Tem garagem?"},
        )
        message_id = sent.json()["id"]

        read = await owner_client.post(f"/api/v1/messages/{message_id}/read")
        assert read.json()["read"] is True

        unread_only = await owner_client.get("/api/v1/messages", params={"unread_only": True})
        assert unread_only.json() == []

        deleted = await owner_client.delete(f"/api/v1/messages/{message_id}")
        assert deleted.status_code == 204

    async def test_agent_cannot_delete_messages(
        self, public_client: AsyncClient, agent_client: AsyncClient, public_domain
    ):
        sent = await public_client.post(
            "/api/v1/public/messages",
            json={"name": "Ana", "email": "ana@example.com", "message": "Tem garagem?"},
        )

        response = await agent_client.delete(f"/api/v1/messages/{sent.json()['id']}")

        assert response.status_code == 403


class TestCrawlerPages:
    async def test_robots_points_to_sitemap(self, public_client: AsyncClient):
        response = await public_client.get("/robots.txt")

        assert response.status_code == 200
        assert "Sitemap: http://www.example.com/sitemap.xml" in response.text

    async def test_sitemap_lists_active_properties(
        self, public_client: AsyncClient, listings
    ):
        response = await public_client.get("/sitemap.xml")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert "http://www.example.com/imovel/casa-em-jurere" in response.text
        assert "casa-antiga" not in response.text

    async def test_share_page_counts_shares(
        self, public_client: AsyncClient, owner_client: AsyncClient, listings
    ):
        response = await public_client.get(f"/share/{listings['casa']['id']}")

        assert response.status_code == 200
        assert "https://cdn.example.com/casa.jpg" in response.text
        assert "http://www.example.com/imovel/casa-em-jurere" in response.text

        detail = await owner_client.get(f"/api/v1/properties/{listings['casa']['id']}")
        assert detail.json()["shares"] == 1

    async def test_share_by_slug(self, public_client: AsyncClient, listings):
        response = await public_client.get("/share/apartamento-centro")

        assert response.status_code == 200
        assert "Apartamento Centro" in response.text
