from app.ai.base_flow import BaseFlow
from app.schemas.ai.ai_schema import ExecutiveSummaryOutput


class ExecutiveSummaryFlow(BaseFlow[ExecutiveSummaryOutput]):
    """Short executive summary of the monthly report"""

    flow_name = "executive_summary"
    output_model = ExecutiveSummaryOutput
    failure_message = "Failed to generate summary. Please try again."
    system_prompt = (
        "You are an expert in analyzing KPI data and generating concise executive summaries. "
        "Always answer with a single JSON object."
    )

    def build_prompt(self, kpi_data: str) -> str:
        return f"""Given the following KPI data for the month, generate a brief executive summary highlighting the key performance insights:

{kpi_data}

The executive summary should be no more than 3-4 sentences long and should focus on the most important trends and achievements.

Respond as JSON: {{"executive_summary": "..."}}"""
