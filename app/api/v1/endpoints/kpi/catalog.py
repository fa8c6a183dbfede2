from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import require_admin, require_menu_access
from app.core.database import get_async_session
from app.models.auth.account import LoginAccount
from app.schemas.common.pagination import PaginatedResponse
from app.schemas.kpi.kpi_schema import KpiResponse, KpiUpdate, MonthlyKpiResponse, PerspectiveGroup
from app.services.kpi.cascade_service import group_by_perspective
from app.services.kpi.kpi_service import KpiService

router = APIRouter()

can_view = require_menu_access("/dashboard", "/cascade", "/kpi-import")

@router.get("/", response_model=PaginatedResponse[KpiResponse])
async def get_kpis(
    page_index: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
    search: Optional[str] = Query(None),
    perspective: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_view)
):
    """Get catalog KPIs with pagination"""
    service = KpiService(session)
    return await service.get_kpis(page_index, page_size, search, perspective)

@router.get("/grouped", response_model=List[PerspectiveGroup])
async def get_grouped_kpis(
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_view)
):
    """Catalog grouped by perspective"""
    service = KpiService(session)
    groups = group_by_perspective(await service.get_all_kpis())
    return [{"perspective": p, "kpis": kpis} for p, kpis in groups.items()]

@router.get("/monthly", response_model=List[MonthlyKpiResponse])
async def get_monthly_kpis(
    parent_kpi_id: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(require_menu_access("/reports", "/dashboard"))
):
    """Monthly target/actual figures"""
    service = KpiService(session)
    return await service.get_monthly_kpis(parent_kpi_id)

@router.get("/{kpi_id}", response_model=KpiResponse)
async def get_kpi(
    kpi_id: str,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_view)
):
    """Get KPI by ID"""
    service = KpiService(session)
    kpi = await service.get_kpi(kpi_id)
    if kpi is None:
        raise HTTPException(status_code=404, detail="KPI not found")
    return kpi

@router.put("/{kpi_id}", response_model=KpiResponse)
async def update_kpi(
    kpi_id: str,
    data: KpiUpdate,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(require_admin)
):
    """Update KPI (admin only)"""
    service = KpiService(session)
    return await service.update_kpi(kpi_id, data, actor_id=current_account.id)

@router.delete("/{kpi_id}")
async def delete_kpi(
    kpi_id: str,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(require_admin)
):
    """Delete KPI (admin only)"""
    service = KpiService(session)
    if not await service.delete_kpi(kpi_id, actor_id=current_account.id):
        raise HTTPException(status_code=404, detail="KPI not found")
    return {"message": "KPI deleted successfully"}
