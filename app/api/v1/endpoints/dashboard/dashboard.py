from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.ai.client import get_ai_client
from app.ai.flows.kpi_insights import KpiInsightsFlow
from app.api.dependencies import require_menu_access
from app.core.database import get_async_session
from app.models.auth.account import LoginAccount
from app.schemas.ai.ai_schema import GenerateRequest, KpiInsightsOutput
from app.schemas.dashboard.dashboard_schema import DashboardSummary
from app.services.dashboard.dashboard_service import DashboardService

router = APIRouter()

can_view_dashboard = require_menu_access("/dashboard")

@router.get("/summary", response_model=DashboardSummary)
async def get_dashboard_summary(
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_view_dashboard)
):
    """Summary cards and department KPI counts"""
    service = DashboardService(session)
    return await service.get_summary()

@router.post("/insights", response_model=KpiInsightsOutput)
async def generate_insights(
    data: Optional[GenerateRequest] = None,
    session: AsyncSession = Depends(get_async_session),
    client=Depends(get_ai_client),
    current_account: LoginAccount = Depends(can_view_dashboard)
):
    """AI insights over the KPI catalog"""
    kpi_data = data.kpi_data if data and data.kpi_data else None
    if kpi_data is None:
        kpi_data = await DashboardService(session).build_insights_input()
    return await KpiInsightsFlow(client).run(kpi_data)
