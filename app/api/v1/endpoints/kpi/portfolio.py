from fastapi import APIRouter, Depends
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import require_menu_access
from app.core.database import get_async_session
from app.models.auth.account import LoginAccount
from app.schemas.kpi.cascade_schema import IndividualKpiResponse
from app.schemas.kpi.portfolio_schema import CommitmentConfirm, CommitmentReject
from app.services.kpi.portfolio_service import PortfolioService

router = APIRouter()

can_view_portfolio = require_menu_access("/portfolio")

@router.get("/", response_model=List[IndividualKpiResponse])
async def get_my_portfolio(
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_view_portfolio)
):
    """KPIs assigned to the signed-in employee"""
    service = PortfolioService(session)
    return await service.list_portfolio(current_account.id)

@router.post("/{kpi_id}/confirm", response_model=IndividualKpiResponse)
async def confirm_commitment(
    kpi_id: str,
    data: CommitmentConfirm,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_view_portfolio)
):
    """Commit to an assigned KPI"""
    service = PortfolioService(session)
    return await service.confirm_commitment(kpi_id, data.notes, employee_id=current_account.id)

@router.post("/{kpi_id}/reject", response_model=IndividualKpiResponse)
async def reject_commitment(
    kpi_id: str,
    data: CommitmentReject,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_view_portfolio)
):
    """Reject an assigned KPI with a reason"""
    service = PortfolioService(session)
    return await service.reject_commitment(kpi_id, data.reason, employee_id=current_account.id)
