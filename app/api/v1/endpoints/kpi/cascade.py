from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import require_menu_access
from app.core.database import get_async_session
from app.models.auth.account import LoginAccount
from app.schemas.kpi.cascade_schema import (
    AssignKpisRequest,
    CascadeRequest,
    CascadeViewResponse,
    CascadedKpiResponse,
    IndividualKpiResponse,
)
from app.services.kpi.cascade_service import CascadeService

router = APIRouter()

can_cascade = require_menu_access("/cascade")

@router.get("/", response_model=CascadeViewResponse)
async def get_cascade_view(
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_cascade)
):
    """Corporate, department and individual levels"""
    service = CascadeService(session)
    return await service.build_cascade_view()

@router.get("/department-kpis", response_model=List[CascadedKpiResponse])
async def get_department_kpis(
    department: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_cascade)
):
    """Cascaded KPIs, optionally for one department"""
    service = CascadeService(session)
    return await service.list_cascaded(department)

@router.post("/kpis/{kpi_id}", response_model=List[CascadedKpiResponse])
async def cascade_kpi(
    kpi_id: str,
    data: CascadeRequest,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_cascade)
):
    """Cascade a corporate KPI to one or more departments"""
    service = CascadeService(session)
    return await service.cascade_kpi(kpi_id, data, actor_id=current_account.id)

@router.delete("/department-kpis/{cascaded_id}")
async def delete_department_kpi(
    cascaded_id: str,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_cascade)
):
    """Remove a KPI from a department"""
    service = CascadeService(session)
    if not await service.delete_cascaded_kpi(cascaded_id, actor_id=current_account.id):
        raise HTTPException(status_code=404, detail="Cascaded KPI not found")
    return {"message": "Cascaded KPI deleted successfully"}

@router.get("/employees/{employee_id}/assignments", response_model=List[IndividualKpiResponse])
async def get_assignments(
    employee_id: str,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_cascade)
):
    """Individual KPIs of one employee"""
    service = CascadeService(session)
    return await service.get_individual_kpis(employee_id)

@router.post("/employees/{employee_id}/assignments", response_model=List[IndividualKpiResponse])
async def assign_kpis(
    employee_id: str,
    data: AssignKpisRequest,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_cascade)
):
    """Assign cascaded and committed KPIs to an employee"""
    service = CascadeService(session)
    return await service.assign_individual_kpis(employee_id, data, actor_id=current_account.id)
