import pytest
from httpx import AsyncClient
from fastapi import HTTPException, status

from app.core.write_errors import write_error_channel
from app.schemas.system.settings_schema import SettingsUpdate
from app.services.system.settings_service import SettingsService
from tests.conftest import json_upload


class TestSettings:
    async def test_defaults_without_stored_document(self, client: AsyncClient, login_as):
        headers = await login_as("staff@example.com")
        response = await client.get("/api/v1/settings/", headers=headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["currency"] == "thb"

    async def test_update_merges(self, client: AsyncClient, admin_headers: dict):
        response = await client.put("/api/v1/settings/", json={"org_name": "ACME"}, headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert data["org_name"] == "ACME"
        assert data["currency"] == "thb"

        response = await client.put("/api/v1/settings/", json={"currency": "usd"}, headers=admin_headers)
        assert response.json()["org_name"] == "ACME"
        assert response.json()["currency"] == "usd"

    async def test_only_admin_updates(self, client: AsyncClient, login_as):
        headers = await login_as("staff@example.com")
        response = await client.put("/api/v1/settings/", json={"org_name": "Mine"}, headers=headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestWriteErrors:
    async def test_failed_write_is_reported(self, client: AsyncClient, admin_headers: dict, db_session, monkeypatch):
        async def failing_commit():
            raise RuntimeError("disk full")

        monkeypatch.setattr(db_session, "commit", failing_commit)
        with pytest.raises(HTTPException) as exc:
            await SettingsService(db_session).update_settings(SettingsUpdate(org_name="X"), actor_id="admin")
        assert exc.value.status_code == 500

        response = await client.get("/api/v1/system/write-errors/", headers=admin_headers)
        errors = response.json()["errors"]
        assert response.json()["count"] == 1
        assert errors[0]["collection"] == "settings"
        assert errors[0]["error"] == "disk full"
        assert errors[0]["actor_id"] == "admin"
        assert write_error_channel.recent()[0]["occurred_at"].tzinfo is not None

        await client.delete("/api/v1/system/write-errors/", headers=admin_headers)
        assert len(write_error_channel) == 0

    async def test_admin_only(self, client: AsyncClient, login_as):
        headers = await login_as("staff@example.com")
        response = await client.get("/api/v1/system/write-errors/", headers=headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestEmployees:
    async def test_create_generates_id(self, client: AsyncClient, admin_headers: dict):
        response = await client.post("/api/v1/employees/", json={"name": "  Ann  "}, headers=admin_headers)
        assert response.status_code == status.HTTP_201_CREATED

        data = response.json()
        assert data["id"].startswith("user-")
        assert data["name"] == "Ann"
        assert data["department"] == "N/A"
        assert data["has_login"] is False

    async def test_duplicate_id(self, client: AsyncClient, admin_headers: dict):
        await client.post("/api/v1/employees/", json={"id": "e1", "name": "Ann"}, headers=admin_headers)
        response = await client.post("/api/v1/employees/", json={"id": "e1", "name": "Bob"}, headers=admin_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_delete_removes_permission_record(self, client: AsyncClient, admin_headers: dict, login_as):
        await client.post("/api/v1/employees/", json={"id": "e1", "name": "Ann"}, headers=admin_headers)
        await login_as("ann@example.com", employee_id="e1")
        await client.put("/api/v1/users/e1/role", json={"role": "Manager"}, headers=admin_headers)

        response = await client.delete("/api/v1/employees/e1", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK

        response = await client.get("/api/v1/users/e1/permissions", headers=admin_headers)
        assert response.json()["is_default"] is True

        response = await client.delete("/api/v1/employees/e1", headers=admin_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_search(self, client: AsyncClient, admin_headers: dict):
        await client.post("/api/v1/employees/", json={"id": "e1", "name": "Ann", "position": "Analyst"}, headers=admin_headers)
        await client.post("/api/v1/employees/", json={"id": "e2", "name": "Bob", "position": "Clerk"}, headers=admin_headers)

        response = await client.get("/api/v1/employees/", params={"search": "ann"}, headers=admin_headers)
        assert [e["id"] for e in response.json()["data"]] == ["e1"]


class TestMasterData:
    async def test_master_data(self, client: AsyncClient, admin_headers: dict):
        await client.post(
            "/api/v1/imports/departments/upload",
            files=json_upload({"departments": [{"id": "d1", "name": "Sales", "head": "Ann"}]}),
            headers=admin_headers,
        )
        response = await client.get("/api/v1/master-data/", headers=admin_headers)
        data = response.json()
        assert data["departments"][0]["name"] == "Sales"
        assert data["departments"][0]["extra_fields"] == {"head": "Ann"}
        assert data["positions"] == []

    async def test_employee_has_no_access(self, client: AsyncClient, login_as):
        headers = await login_as("staff@example.com")
        response = await client.get("/api/v1/master-data/roles", headers=headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestHealth:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.json()["status"] == "healthy"

    async def test_request_id_echoed(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-Id": "abc-123"})
        assert response.headers["X-Request-Id"] == "abc-123"

    async def test_request_id_minted_when_missing(self, client: AsyncClient):
        response = await client.get("/health")
        assert len(response.headers["X-Request-Id"]) == 32
