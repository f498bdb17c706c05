"""Integration tests for agency membership management."""

import pytest
from httpx import AsyncClient

from tests.conftest import ADMIN_HOST, add_membership, create_user, make_client
from zatch.core.auth import create_access_token


pytestmark = pytest.mark.integration


async def _membership_id(client: AsyncClient, email: str) -> str:
    response = await client.get("/api/v1/members")
    return next(m["id"] for m in response.json() if m["email"] == email)


class TestMembers:
    async def test_list_members(self, owner_client: AsyncClient, agent):
        response = await owner_client.get("/api/v1/members")

        assert response.status_code == 200
        roles = {m["email"]: m["role"] for m in response.json()}
        assert roles == {"owner@example.com": "owner", "agent@example.com": "agent"}

    async def test_add_member_by_email(self, owner_client: AsyncClient, db):
        await create_user(db, "nova@example.com", "Nova Corretora")

        response = await owner_client.post(
            "/api/v1/members", json={"email": "nova@example.com", "role": "agent"}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["full_name"] == "Nova Corretora"
        assert data["role"] == "agent"

    async def test_add_unknown_email(self, owner_client: AsyncClient):
        response = await owner_client.post(
            "/api/v1/members", json={"email": "ghost@example.com", "role": "agent"}
        )

        assert response.status_code == 404

    async def test_add_existing_member(self, owner_client: AsyncClient, agent):
        response = await owner_client.post(
            "/api/v1/members", json={"email": "agent@example.com", "role": "agent"}
        )

        assert response.status_code == 409
        assert response.json()["code"] == "already_member"

    async def test_owner_role_cannot_be_granted_on_invite(
        self, owner_client: AsyncClient, outsider
    ):
        response = await owner_client.post(
            "/api/v1/members", json={"email": "outsider@example.com", "role": "owner"}
        )

        assert response.status_code == 422

    async def test_agent_cannot_manage_members(self, agent_client: AsyncClient, outsider):
        response = await agent_client.post(
            "/api/v1/members", json={"email": "outsider@example.com", "role": "agent"}
        )

        assert response.status_code == 403
        assert response.json()["code"] == "permission_denied"

    async def test_admin_cannot_add_admin(
        self, app, db, tenant, admin_domain, permissions, outsider
    ):
        admin = await create_user(db, "admin@example.com", "Ada Admin")
        await add_membership(db, tenant, admin, "admin")

        async with make_client(app, ADMIN_HOST, create_access_token(admin.id)) as client:
            response = await client.post(
                "/api/v1/members", json={"email": "outsider@example.com", "role": "admin"}
            )

        assert response.status_code == 403
        assert response.json()["code"] == "member_management_denied"

    async def test_change_role(self, owner_client: AsyncClient, agent):
        membership_id = await _membership_id(owner_client, "agent@example.com")

        response = await owner_client.patch(
            f"/api/v1/members/{membership_id}", json={"role": "admin"}
        )

        assert response.status_code == 200
        assert response.json()["role"] == "admin"

    async def test_last_owner_cannot_leave(self, owner_client: AsyncClient):
        membership_id = await _membership_id(owner_client, "owner@example.com")

        response = await owner_client.delete(f"/api/v1/members/{membership_id}")

        assert response.status_code == 400
        assert response.json()["code"] == "last_owner"

    async def test_remove_member(self, owner_client: AsyncClient, agent):
        membership_id = await _membership_id(owner_client, "agent@example.com")

        response = await owner_client.delete(f"/api/v1/members/{membership_id}")
        assert response.status_code == 204

        remaining = await owner_client.get("/api/v1/members")
        assert [m["email"] for m in remaining.json()] == ["owner@example.com"]

    async def test_removed_member_is_gated(self, app, owner_client: AsyncClient, agent):
        membership_id = await _membership_id(owner_client, "agent@example.com")
        await owner_client.delete(f"/api/v1/members/{membership_id}")

        async with make_client(app, ADMIN_HOST, create_access_token(agent.id)) as client:
            response = await client.get("/api/v1/tenant/context")

        assert response.json()["state"] == "not_member"
