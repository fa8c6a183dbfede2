import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.ai.client import get_ai_client
from app.ai.flows.executive_summary import ExecutiveSummaryFlow
from app.api.dependencies import require_menu_access
from app.core.database import get_async_session
from app.models.auth.account import LoginAccount
from app.models.shared.enums import ExportFormat
from app.schemas.ai.ai_schema import ExecutiveSummaryOutput, GenerateRequest
from app.schemas.report.report_schema import MonthlyReportResponse
from app.services.reports.report_service import ReportService

router = APIRouter()
logger = logging.getLogger(__name__)

can_view_reports = require_menu_access("/reports")

@router.get("/monthly", response_model=MonthlyReportResponse)
async def get_monthly_report(
    month: Optional[int] = Query(None, ge=1, le=12),
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_view_reports)
):
    """Monthly and year-to-date achievement per cascaded KPI, with the top departments"""
    service = ReportService(session)
    return await service.get_monthly_report(month)

@router.get("/monthly/export")
async def export_monthly_report(
    format: ExportFormat = Query(ExportFormat.CSV),
    month: Optional[int] = Query(None, ge=1, le=12),
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_view_reports)
):
    """Download the monthly report as CSV or Excel"""
    service = ReportService(session)
    logger.info(f"Report export ({format.value}) requested by {current_account.id}")
    return await service.export_monthly_report(format.value, month)

@router.post("/executive-summary", response_model=ExecutiveSummaryOutput)
async def generate_executive_summary(
    data: Optional[GenerateRequest] = None,
    month: Optional[int] = Query(None, ge=1, le=12),
    session: AsyncSession = Depends(get_async_session),
    client=Depends(get_ai_client),
    current_account: LoginAccount = Depends(can_view_reports)
):
    """AI executive summary of the monthly report"""
    kpi_data = data.kpi_data if data and data.kpi_data else None
    if kpi_data is None:
        kpi_data = await ReportService(session).build_summary_input(month)
    return await ExecutiveSummaryFlow(client).run(kpi_data)
