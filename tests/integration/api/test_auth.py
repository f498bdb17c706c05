"""Integration tests for auth endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from tests.conftest import TEST_PASSWORD
from zatch.modules.tenants.models import Tenant, TenantUser


pytestmark = pytest.mark.integration


class TestRegistration:
    """Tests for user registration endpoint."""

    async def test_register_with_agency(self, client: AsyncClient, db):
        """POST /api/v1/auth/register should create the user and its agency."""
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": "newuser@example.com",
                "password": TEST_PASSWORD,
                "full_name": "New User",
                "tenant_name": "Lar Doce Lar Imóveis",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["user"]["email"] == "newuser@example.com"
        assert data["tenant_id"] is not None

        tenant = await db.scalar(select(Tenant).where(Tenant.slug == "lar-doce-lar-imoveis"))
        assert tenant is not None
        membership = await db.scalar(
            select(TenantUser).where(TenantUser.tenant_id == tenant.id)
        )
        assert membership.role == "owner"

    async def test_register_without_agency(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": "solo@example.com",
                "password": TEST_PASSWORD,
                "full_name": "Solo User",
            },
        )

        assert response.status_code == 201
        assert response.json()["tenant_id"] is None

    async def test_register_duplicate_email(self, client: AsyncClient, owner):
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": "owner@example.com",
                "password": TEST_PASSWORD,
                "full_name": "Another User",
            },
        )

        assert response.status_code == 409
        assert response.json()["code"] == "registration_failed"

    async def test_register_weak_password(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": "newuser@example.com",
                "password": "short",
                "full_name": "New User",
            },
        )

        assert response.status_code == 422


class TestLogin:
    """Tests for login, refresh and logout."""

    async def test_login_success(self, client: AsyncClient, owner):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "owner@example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["expires_in"] > 0

    async def test_login_wrong_password(self, client: AsyncClient, owner):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "owner@example.com", "password": "WrongPass123!"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "invalid_credentials"

    async def test_refresh_rotates_token(self, client: AsyncClient, owner):
        login = await client.post(
            "/api/v1/auth/login",
            json={"email": "owner@example.com", "password": TEST_PASSWORD},
        )
        old_refresh = login.json()["refresh_token"]

        response = await client.post(
            "/api/v1/auth/refresh", json={"refresh_token": old_refresh}
        )
        assert response.status_code == 200
        assert response.json()["refresh_token"] != old_refresh

        reused = await client.post("/api/v1/auth/refresh", json={"refresh_token": old_refresh})
        assert reused.status_code == 401

    async def test_logout_revokes_refresh_token(self, client: AsyncClient, owner):
        login = await client.post(
            "/api/v1/auth/login",
            json={"email": "owner@example.com", "password": TEST_PASSWORD},
        )
        refresh = login.json()["refresh_token"]

        response = await client.post("/api/v1/auth/logout", json={"refresh_token": refresh})
        assert response.status_code == 204

        again = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})
        assert again.status_code == 401


class TestCurrentUser:
    async def test_me_requires_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["code"] == "missing_token"

    async def test_me(self, owner_client: AsyncClient):
        response = await owner_client.get("/api/v1/auth/me")

        assert response.status_code == 200
        assert response.json()["full_name"] == "Olivia Owner"

    async def test_update_me(self, owner_client: AsyncClient):
        response = await owner_client.patch("/api/v1/auth/me", json={"full_name": "Olivia O."})

        assert response.status_code == 200
        assert response.json()["full_name"] == "Olivia O."

    async def test_change_password_checks_current(self, owner_client: AsyncClient):
        response = await owner_client.post(
            "/api/v1/auth/me/password",
            json={"current_password": "NotMine123!", "new_password": "BrandNew456!"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_current_password"
