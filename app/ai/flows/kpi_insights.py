from app.ai.base_flow import BaseFlow
from app.schemas.ai.ai_schema import KpiInsightsOutput


class KpiInsightsFlow(BaseFlow[KpiInsightsOutput]):
    """Three or four actionable insights from the KPI catalog"""

    flow_name = "kpi_insights"
    output_model = KpiInsightsOutput
    failure_message = "Failed to generate insights. Please try again."
    system_prompt = (
        "You are a world-class business analyst. Your task is to analyze a set of "
        "Key Performance Indicator (KPI) data and extract the most critical, actionable insights. "
        "Always answer with a single JSON object."
    )

    def build_prompt(self, kpi_data: str) -> str:
        return f"""Analyze the provided KPI data:
{kpi_data}

From your analysis, generate 3-4 key insights. For each insight, provide:
1. "title": a short, impactful title (e.g., "Revenue Exceeds Target", "Hiring Outpaces Revenue").
2. "description": a one-sentence description explaining the core observation.
3. "recommendation": a concise, actionable recommendation for leadership.
4. "icon": the most appropriate icon, one of "TrendingUp" (positive), "TrendingDown" (negative) or "AlertTriangle" (warning).

Focus on the most significant trends, deviations from targets, and relationships between different KPIs.
Your output should be direct, strategic, and immediately useful for executive decision-making.

Respond as JSON: {{"insights": [{{"title": "...", "description": "...", "recommendation": "...", "icon": "TrendingUp"}}]}}"""
