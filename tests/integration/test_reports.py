import json

from httpx import AsyncClient
from fastapi import status

from tests.conftest import json_upload

API = "/api/v1"

MONTHLY = {
    "monthly_kpis": [
        {"id": "m1", "parentKpiId": "kpi-1", "month": 1, "target": 100, "actual": 90},
        {"id": "m2", "parentKpiId": "kpi-1", "month": 2, "target": 100, "actual": 120},
        {"id": "m3", "parentKpiId": "kpi-1", "month": 3, "target": 100, "actual": 0},
    ]
}

INSIGHTS = {
    "insights": [
        {"title": "Revenue up", "description": "Above plan.", "recommendation": "Hold course.", "icon": "TrendingUp"},
        {"title": "NPS down", "description": "Below plan.", "recommendation": "Call customers.", "icon": "TrendingDown"},
        {"title": "Thin data", "description": "Few actuals.", "recommendation": "Import more.", "icon": "AlertTriangle"},
    ]
}


async def seed(client, headers):
    catalog = {"kpi_catalog": [
        {"id": "kpi-1", "perspective": "Financial", "measure": "Revenue"},
        {"id": "kpi-2", "perspective": "Customer", "measure": "NPS"},
    ]}
    org = [{"id": "e1", "name": "Ann", "department": "Sales"}, {"id": "e2", "name": "Bob", "department": "Finance"}]
    await client.post(f"{API}/imports/kpi_catalog/upload", files=json_upload(catalog), headers=headers)
    await client.post(f"{API}/imports/organization", files=json_upload(org), headers=headers)
    await client.post(f"{API}/imports/monthly_kpis/upload", files=json_upload(MONTHLY), headers=headers)
    await client.post(
        f"{API}/cascade/kpis/kpi-1",
        json={"departments": ["Sales"], "department_target": "200", "weight": 50},
        headers=headers,
    )


class TestMonthlyReport:
    async def test_report_defaults_to_latest_month_with_actuals(self, client: AsyncClient, admin_headers: dict):
        await seed(client, admin_headers)

        response = await client.get(f"{API}/reports/monthly", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK

        report = response.json()
        assert report["month"] == 2
        assert report["month_name"] == "Feb"
        row = report["rows"][0]
        assert row["measure"] == "Revenue"
        assert row["month_achievement"] == 120.0
        assert row["ytd_target"] == 200.0
        assert row["ytd_actual"] == 210.0
        assert row["ytd_badge"] == "success"
        assert [d["department"] for d in report["top_departments"]] == ["Sales", "Finance"]

    async def test_explicit_month(self, client: AsyncClient, admin_headers: dict):
        await seed(client, admin_headers)
        response = await client.get(f"{API}/reports/monthly", params={"month": 1}, headers=admin_headers)
        row = response.json()["rows"][0]
        assert row["month_achievement"] == 90.0
        assert row["month_badge"] == "warning"

    async def test_csv_export(self, client: AsyncClient, admin_headers: dict):
        await seed(client, admin_headers)
        response = await client.get(f"{API}/reports/monthly/export", params={"format": "csv"}, headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("text/csv")
        lines = response.text.strip().splitlines()
        assert lines[0].startswith("KPI,Department,Weight (%)")
        assert "Revenue,Sales,50" in lines[1]

    async def test_excel_export(self, client: AsyncClient, admin_headers: dict):
        await seed(client, admin_headers)
        response = await client.get(f"{API}/reports/monthly/export", params={"format": "excel"}, headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.content[:2] == b"PK"

    async def test_employee_cannot_view(self, client: AsyncClient, login_as):
        headers = await login_as("staff@example.com")
        response = await client.get(f"{API}/reports/monthly", headers=headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestAIEndpoints:
    async def test_executive_summary_uses_stored_report(self, client: AsyncClient, admin_headers: dict, fake_ai):
        await seed(client, admin_headers)
        fake = fake_ai(json.dumps({"executive_summary": "Sales is ahead of plan."}))

        response = await client.post(f"{API}/reports/executive-summary", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"executive_summary": "Sales is ahead of plan."}

        prompt = fake.completions.calls[0]["messages"][1]["content"]
        assert '"reportMonth": "Feb"' in prompt
        assert '"ytdActual": 210.0' in prompt

    async def test_explicit_kpi_data(self, client: AsyncClient, admin_headers: dict, fake_ai):
        fake = fake_ai(json.dumps({"executive_summary": "Fine."}))
        response = await client.post(
            f"{API}/reports/executive-summary", json={"kpi_data": '{"custom": true}'}, headers=admin_headers
        )
        assert response.status_code == status.HTTP_200_OK
        assert '{"custom": true}' in fake.completions.calls[0]["messages"][1]["content"]

    async def test_summary_failure(self, client: AsyncClient, admin_headers: dict, fake_ai):
        fake_ai(error=RuntimeError("upstream down"))
        response = await client.post(f"{API}/reports/executive-summary", headers=admin_headers)
        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.json()["detail"] == "Failed to generate summary. Please try again."

    async def test_ai_disabled_without_key(self, client: AsyncClient, admin_headers: dict):
        response = await client.post(f"{API}/dashboard/insights", headers=admin_headers)
        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.json()["detail"] == "Failed to generate insights. Please try again."

    async def test_insights(self, client: AsyncClient, admin_headers: dict, fake_ai):
        await seed(client, admin_headers)
        fake = fake_ai(json.dumps(INSIGHTS))

        response = await client.post(f"{API}/dashboard/insights", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        assert [i["icon"] for i in response.json()["insights"]] == ["TrendingUp", "TrendingDown", "AlertTriangle"]
        assert "Revenue" in fake.completions.calls[0]["messages"][1]["content"]


class TestDashboard:
    async def test_summary_with_placeholders(self, client: AsyncClient, admin_headers: dict):
        await seed(client, admin_headers)

        response = await client.get(f"{API}/dashboard/summary", headers=admin_headers)
        data = response.json()
        assert [k["id"] for k in data["summary_kpis"]] == ["kpi-1", "kpi-2"]
        assert data["placeholders"] == 2
        assert data["total_employees"] == 2
        assert {d["department"]: d["cascaded_kpis"] for d in data["departments"]} == {"Sales": 1, "Finance": 0}

    async def test_employee_sees_dashboard(self, client: AsyncClient, login_as):
        headers = await login_as("staff@example.com")
        response = await client.get(f"{API}/dashboard/summary", headers=headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["placeholders"] == 4
