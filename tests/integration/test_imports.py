import json

from httpx import AsyncClient
from fastapi import status

from app.core.write_errors import write_error_channel
from tests.conftest import json_upload

CATALOG = {
    "kpi_catalog": [
        {"id": "kpi-1", "perspective": "Financial", "measure": "Revenue", "target": "≥ 194.10 ล้านบาท"},
        {"id": "kpi-2", "perspective": "Customer", "measure": "NPS", "target": "≥ 60"},
        {"measure": "No id"},
    ]
}


class TestImports:
    async def test_upload_writes_records(self, client: AsyncClient, admin_headers: dict):
        response = await client.post("/api/v1/imports/kpi_catalog/upload", files=json_upload(CATALOG), headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK

        result = response.json()
        assert result["written"] == 2
        assert result["skipped_indexes"] == [2]

        response = await client.get("/api/v1/kpis/grouped", headers=admin_headers)
        groups = response.json()
        assert [g["perspective"] for g in groups] == ["Financial", "Customer"]

    async def test_wrong_key_writes_nothing(self, client: AsyncClient, admin_headers: dict):
        payload = {"content": json.dumps({"departments": [{"id": "d1", "name": "Sales"}]})}
        response = await client.post("/api/v1/imports/kpi_catalog/text", json=payload, headers=admin_headers)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "kpi_catalog" in response.json()["detail"]

        response = await client.get("/api/v1/kpis/", headers=admin_headers)
        assert response.json()["count"] == 0

    async def test_monthly_row_without_parent_is_malformed(self, client: AsyncClient, admin_headers: dict):
        payload = {"content": json.dumps({"monthly_kpis": [{"id": "m1", "month": 1, "target": 10, "actual": 5}]})}
        response = await client.post("/api/v1/imports/monthly_kpis/text", json=payload, headers=admin_headers)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["detail"] == "Record 0: 'parent_kpi_id' is required."
        assert len(write_error_channel) == 0

    async def test_non_json_file_rejected(self, client: AsyncClient, admin_headers: dict):
        files = {"file": ("org.csv", b"id,name\n1,Ann", "text/csv")}
        response = await client.post("/api/v1/imports/organization", files=files, headers=admin_headers)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_organization_import_remaps_thai_headers(self, client: AsyncClient, admin_headers: dict):
        rows = [
            {"รหัส": 1001, "ชื่อ-นามสกุล": "สมชาย ใจดี", "แผนก": "ขาย", "ตำแหน่ง": "ผู้จัดการ", "ผู้บังคับบัญชา": "CEO"},
            {"ชื่อ-นามสกุล": "ไม่มีรหัส"},
        ]
        response = await client.post("/api/v1/imports/organization", files=json_upload(rows), headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["written"] == 2

        response = await client.get("/api/v1/employees/", headers=admin_headers)
        employees = {e["name"]: e for e in response.json()["data"]}
        assert employees["สมชาย ใจดี"]["id"] == "1001"
        assert employees["สมชาย ใจดี"]["department"] == "ขาย"
        assert employees["ไม่มีรหัส"]["id"].startswith("user-")
        assert employees["ไม่มีรหัส"]["department"] == "N/A"

    async def test_employee_cannot_import(self, client: AsyncClient, login_as):
        headers = await login_as("staff@example.com")
        response = await client.post("/api/v1/imports/kpi_catalog/upload", files=json_upload(CATALOG), headers=headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestStagedImports:
    async def test_stage_preview_commit(self, client: AsyncClient, admin_headers: dict):
        payload = {"positions": [{"id": "p1", "name": "Analyst", "department": "Finance"}]}
        response = await client.post("/api/v1/imports/positions/stage", files=json_upload(payload, "positions.json"), headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["count"] == 1
        assert response.json()["source"] == "positions.json"

        response = await client.get("/api/v1/master-data/positions", headers=admin_headers)
        assert response.json() == []

        response = await client.get("/api/v1/imports/positions/staged", headers=admin_headers)
        assert response.json()["records"][0]["name"] == "Analyst"

        response = await client.post("/api/v1/imports/positions/staged/commit", headers=admin_headers)
        assert response.json()["written"] == 1

        response = await client.get("/api/v1/master-data/positions", headers=admin_headers)
        assert [p["name"] for p in response.json()] == ["Analyst"]

        response = await client.get("/api/v1/imports/positions/staged", headers=admin_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_discard(self, client: AsyncClient, admin_headers: dict):
        payload = {"roles": [{"id": "r1", "name": "Auditor"}]}
        await client.post("/api/v1/imports/roles/stage", files=json_upload(payload), headers=admin_headers)

        response = await client.delete("/api/v1/imports/roles/staged", headers=admin_headers)
        assert response.json()["discarded"] is True

        response = await client.post("/api/v1/imports/roles/staged/commit", headers=admin_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND
