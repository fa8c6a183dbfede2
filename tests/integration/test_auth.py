import pytest
from httpx import AsyncClient
from fastapi import status

from app.models.shared.enums import Role
from tests.conftest import TEST_PASSWORD


class TestAuth:
    """Test authentication endpoints"""

    async def test_register_user(self, client: AsyncClient):
        """Test account registration"""
        user_data = {
            "email": "Test@Example.com",
            "password": TEST_PASSWORD,
            "display_name": "Test User",
        }

        response = await client.post("/api/v1/auth/register", json=user_data)
        assert response.status_code == status.HTTP_201_CREATED

        data = response.json()
        assert data["account"]["email"] == "test@example.com"
        assert data["role"] == "Employee"
        assert data["menu_access"]["/submit"] is True
        assert "hashed_password" not in data["account"]

    async def test_register_duplicate_email(self, client: AsyncClient):
        user_data = {"email": "dup@example.com", "password": TEST_PASSWORD}
        await client.post("/api/v1/auth/register", json=user_data)

        response = await client.post("/api/v1/auth/register", json=user_data)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_register_short_password(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/register", json={"email": "short@example.com", "password": "abc"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_login_success(self, client: AsyncClient):
        """Test successful login"""
        await client.post("/api/v1/auth/register", json={"email": "login@example.com", "password": TEST_PASSWORD})

        response = await client.post("/api/v1/auth/login", json={"email": "login@example.com", "password": TEST_PASSWORD})
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert "access_token" in data
        assert data["token_type"] == "bearer"
        assert data["account"]["last_login"] is not None

    async def test_login_invalid_credentials(self, client: AsyncClient):
        """Test login with invalid credentials"""
        login_data = {
            "email": "nonexistent@example.com",
            "password": "wrongpassword"
        }

        response = await client.post("/api/v1/auth/login", json=login_data)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_token_form_login(self, client: AsyncClient):
        await client.post("/api/v1/auth/register", json={"email": "form@example.com", "password": TEST_PASSWORD})

        response = await client.post(
            "/api/v1/auth/token",
            data={"username": "form@example.com", "password": TEST_PASSWORD},
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["token_type"] == "bearer"

    async def test_anonymous_sign_in(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/anonymous")
        assert response.status_code == status.HTTP_201_CREATED

        data = response.json()
        assert data["account"]["is_anonymous"] is True
        assert data["role"] == "Employee"

    async def test_get_current_account(self, client: AsyncClient, admin_headers: dict):
        """Test getting current account info"""
        response = await client.get("/api/v1/auth/me", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert data["account"]["email"] == "admin@example.com"
        assert data["role"] == "Admin"
        assert data["is_default"] is False
        assert all(data["menu_access"].values())

    async def test_me_without_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")
        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)

    async def test_garbage_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_role_is_read_from_storage(self, client: AsyncClient, login_as, admin_headers: dict):
        """A role change applies to tokens issued before it"""
        headers = await login_as("worker@example.com", employee_id="emp-1")

        response = await client.get("/api/v1/approvals/submissions", headers=headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

        response = await client.put(
            "/api/v1/users/emp-1/role", json={"role": Role.MANAGER.value}, headers=admin_headers
        )
        assert response.status_code == status.HTTP_200_OK

        response = await client.get("/api/v1/approvals/submissions", headers=headers)
        assert response.status_code == status.HTTP_200_OK
