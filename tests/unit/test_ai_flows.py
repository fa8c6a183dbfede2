import json

import pytest

from app.ai.flows.executive_summary import ExecutiveSummaryFlow
from app.ai.flows.kpi_insights import KpiInsightsFlow
from app.core.exceptions import AIGenerationError
from app.models.shared.enums import InsightIcon
from tests.conftest import FakeAIClient


def insight(icon="TrendingUp"):
    return {
        "title": "Revenue Exceeds Target",
        "description": "Revenue is 12% above plan.",
        "recommendation": "Keep the current pricing.",
        "icon": icon,
    }


class TestKpiInsightsFlow:
    async def test_valid_output(self):
        client = FakeAIClient(json.dumps({"insights": [insight(), insight("TrendingDown"), insight("AlertTriangle")]}))
        result = await KpiInsightsFlow(client, model="test-model").run('[{"id": "k1"}]')

        assert [i.icon for i in result.insights] == [
            InsightIcon.TRENDING_UP, InsightIcon.TRENDING_DOWN, InsightIcon.ALERT_TRIANGLE
        ]
        call = client.completions.calls[0]
        assert call["model"] == "test-model"
        assert call["response_format"] == {"type": "json_object"}
        assert '[{"id": "k1"}]' in call["messages"][1]["content"]

    async def test_unknown_icon_is_rejected(self):
        client = FakeAIClient(json.dumps({"insights": [insight(), insight(), insight("Smile")]}))
        with pytest.raises(AIGenerationError) as exc:
            await KpiInsightsFlow(client).run("[]")
        assert exc.value.detail == "Failed to generate insights. Please try again."

    async def test_too_few_insights_is_rejected(self):
        client = FakeAIClient(json.dumps({"insights": [insight()]}))
        with pytest.raises(AIGenerationError):
            await KpiInsightsFlow(client).run("[]")

    async def test_transport_error(self):
        client = FakeAIClient(error=TimeoutError("timed out"))
        with pytest.raises(AIGenerationError):
            await KpiInsightsFlow(client).run("[]")
        assert len(client.completions.calls) == 1

    async def test_no_client(self):
        with pytest.raises(AIGenerationError):
            await KpiInsightsFlow(None).run("[]")


class TestExecutiveSummaryFlow:
    async def test_camel_case_key_accepted(self):
        client = FakeAIClient(json.dumps({"executiveSummary": "Sales led the month."}))
        result = await ExecutiveSummaryFlow(client).run("{}")
        assert result.executive_summary == "Sales led the month."

    async def test_non_json_output(self):
        client = FakeAIClient("Sales led the month.")
        with pytest.raises(AIGenerationError) as exc:
            await ExecutiveSummaryFlow(client).run("{}")
        assert exc.value.detail == "Failed to generate summary. Please try again."

    async def test_empty_summary(self):
        client = FakeAIClient(json.dumps({"executive_summary": ""}))
        with pytest.raises(AIGenerationError):
            await ExecutiveSummaryFlow(client).run("{}")
