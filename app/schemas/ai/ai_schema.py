from pydantic import AliasChoices, BaseModel, Field
from typing import List, Optional

from app.models.shared.enums import InsightIcon

class Insight(BaseModel):
    title: str = Field(description="A short, impactful title for the insight.")
    description: str = Field(description="A one-sentence explanation of the key observation.")
    recommendation: str = Field(description="A concise, actionable recommendation.")
    icon: InsightIcon = Field(description="TrendingUp for positive, TrendingDown for negative, AlertTriangle for a warning.")

class KpiInsightsOutput(BaseModel):
    insights: List[Insight] = Field(min_length=3, max_length=4)

class ExecutiveSummaryOutput(BaseModel):
    executive_summary: str = Field(
        min_length=1,
        validation_alias=AliasChoices("executive_summary", "executiveSummary"),
    )

class GenerateRequest(BaseModel):
    """KPI data as a JSON string; built from stored records when omitted"""
    kpi_data: Optional[str] = None
