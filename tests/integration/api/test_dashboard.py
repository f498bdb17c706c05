"""Integration tests for the dashboard statistics."""

import pytest
from httpx import AsyncClient

from tests.integration.api.test_properties import create_property


pytestmark = pytest.mark.integration


async def test_stats(
    owner_client: AsyncClient, public_client: AsyncClient, public_domain
):
    casa = await create_property(owner_client, title="Casa em Jurerê", featured=True)
    await create_property(owner_client, title="Apartamento", status="aluguel")
    await create_property(owner_client, title="Casa Antiga", active=False)
    await public_client.get("/api/v1/public/properties/casa-em-jurere")
    await public_client.get(f"/share/{casa['id']}")
    await public_client.post(
        "/api/v1/public/messages",
        json={"name": "Ana", "email": "ana@example.com", "message": "Olá"},
    )

    response = await owner_client.get("/api/v1/dashboard/stats")

    assert response.status_code == 200
    assert response.json() == {
        "total_properties": 3,
        "active_properties": 2,
        "featured_properties": 1,
        "by_status": {"venda": 2, "aluguel": 1},
        "unread_messages": 1,
        "total_views": 1,
        "total_shares": 1,
    }


async def test_agent_sees_dashboard(agent_client: AsyncClient):
    response = await agent_client.get("/api/v1/dashboard/stats")

    assert response.status_code == 200
    assert response.json()["total_properties"] == 0


async def test_revoked_dashboard_access(owner_client: AsyncClient, agent_client: AsyncClient):
    await owner_client.patch(
        "/api/v1/role-permissions/agent/dashboard",
        json={"action": "view", "value": False},
    )

    response = await agent_client.get("/api/v1/dashboard/stats")

    assert response.status_code == 403
