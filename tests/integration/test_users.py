from httpx import AsyncClient
from fastapi import status

from app.models.shared.enums import Role

API = "/api/v1/users"


class TestUserPermissions:
    async def _employee(self, client, admin_headers, employee_id, name, position):
        response = await client.post(
            "/api/v1/employees/",
            json={"id": employee_id, "name": name, "department": "Sales", "position": position},
            headers=admin_headers,
        )
        assert response.status_code == status.HTTP_201_CREATED

    async def test_matrix(self, client: AsyncClient, admin_headers: dict, login_as):
        await self._employee(client, admin_headers, "e1", "Ann", "Sales Manager")
        await self._employee(client, admin_headers, "e2", "Bob", "Clerk")
        await login_as("ann@example.com", employee_id="e1")

        response = await client.get(f"{API}/permissions", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK

        rows = {row["user_id"]: row for row in response.json()["rows"]}
        assert rows["e1"]["has_login"] is True
        assert rows["e1"]["suggested_role"] == "Manager"
        assert rows["e2"]["has_login"] is False
        assert rows["e2"]["is_default"] is True

    async def test_bulk_save_skips_ids_without_login(self, client: AsyncClient, admin_headers: dict, login_as):
        await login_as("ann@example.com", employee_id="e1")
        payload = {
            "permissions": {
                "e1": {"role": "AVP", "menu_access": {"/dashboard": True, "/approvals": True}},
                "e2": {"role": "VP", "menu_access": {}},
            }
        }
        response = await client.put(f"{API}/permissions", json=payload, headers=admin_headers)
        assert response.json() == {"saved": ["e1"], "skipped": ["e2"]}

        response = await client.get(f"{API}/e1/permissions", headers=admin_headers)
        assert response.json()["role"] == "AVP"

    async def test_role_change_resets_menu_access(self, client: AsyncClient, admin_headers: dict, login_as):
        await login_as("ann@example.com", employee_id="e1")

        response = await client.put(
            f"{API}/e1/menu-access", json={"route": "/reports", "allowed": True}, headers=admin_headers
        )
        assert response.json()["menu_access"]["/reports"] is True

        response = await client.put(f"{API}/e1/role", json={"role": Role.EMPLOYEE.value}, headers=admin_headers)
        assert response.json()["menu_access"]["/reports"] is False

    async def test_unknown_route_rejected(self, client: AsyncClient, admin_headers: dict, login_as):
        await login_as("ann@example.com", employee_id="e1")
        response = await client.put(
            f"{API}/e1/menu-access", json={"route": "/nowhere", "allowed": True}, headers=admin_headers
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_delete_falls_back_to_defaults(self, client: AsyncClient, admin_headers: dict, login_as):
        await login_as("ann@example.com", Role.MANAGER, employee_id="e1")

        response = await client.delete(f"{API}/e1/permissions", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK

        response = await client.get(f"{API}/e1/permissions", headers=admin_headers)
        assert response.json()["role"] == "Employee"
        assert response.json()["is_default"] is True

        response = await client.delete(f"{API}/e1/permissions", headers=admin_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_non_admin_cannot_change_roles(self, client: AsyncClient, login_as):
        headers = await login_as("vp@example.com", Role.VP, employee_id="vp1")

        response = await client.get(f"{API}/permissions", headers=headers)
        assert response.status_code == status.HTTP_200_OK

        response = await client.put(f"{API}/vp1/role", json={"role": "Admin"}, headers=headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_read_own_permissions_only(self, client: AsyncClient, login_as):
        headers = await login_as("staff@example.com", employee_id="s1")
        await login_as("other@example.com", employee_id="s2")

        response = await client.get(f"{API}/s1/permissions", headers=headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["has_login"] is True

        response = await client.get(f"{API}/s2/permissions", headers=headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_bulk_save_rejects_unknown_route(self, client: AsyncClient, admin_headers: dict, login_as):
        await login_as("ann@example.com", employee_id="e1")
        payload = {"permissions": {"e1": {"role": "Employee", "menu_access": {"/dashboard": True, "/nope": True}}}}
        response = await client.put(f"{API}/permissions", json=payload, headers=admin_headers)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

        response = await client.get(f"{API}/e1/permissions", headers=admin_headers)
        assert response.json()["is_default"] is True


class TestAdminMenuAccess:
    async def test_admin_can_lose_a_route(self, client: AsyncClient, login_as):
        headers = await login_as("boss@example.com", Role.ADMIN, employee_id="boss")
        assert (await client.get("/api/v1/reports/monthly", headers=headers)).status_code == status.HTTP_200_OK

        response = await client.put(
            f"{API}/boss/menu-access", json={"route": "/reports", "allowed": False}, headers=headers
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["menu_access"]["/reports"] is False

        response = await client.get("/api/v1/reports/monthly", headers=headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_admin_only_operations_follow_role(self, client: AsyncClient, login_as):
        headers = await login_as("boss@example.com", Role.ADMIN, employee_id="boss")
        await client.put(f"{API}/boss/menu-access", json={"route": "/settings", "allowed": False}, headers=headers)

        response = await client.put("/api/v1/settings/", json={"org_name": "ACME"}, headers=headers)
        assert response.status_code == status.HTTP_200_OK
