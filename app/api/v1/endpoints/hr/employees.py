import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import require_admin, require_menu_access
from app.core.database import get_async_session
from app.models.auth.account import LoginAccount
from app.schemas.common.pagination import PaginatedResponse
from app.schemas.hr.employee_schema import EmployeeCreate, EmployeeResponse
from app.services.hr.employee_service import EmployeeService

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/", response_model=PaginatedResponse[EmployeeResponse])
async def get_employees(
    page_index: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
    search: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(require_menu_access("/master-data", "/user-management", "/cascade"))
):
    """Get employees with pagination"""
    service = EmployeeService(session)
    return await service.get_employees(page_index, page_size, search, department)

@router.post("/", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    data: EmployeeCreate,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(require_admin)
):
    """Add an employee; an id is generated when none is given (admin only)"""
    service = EmployeeService(session)
    return await service.create_employee(data, actor_id=current_account.id)

@router.delete("/{employee_id}")
async def delete_employee(
    employee_id: str,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(require_admin)
):
    """Delete an employee and their permission record (admin only)"""
    service = EmployeeService(session)
    await service.delete_employee(employee_id, actor_id=current_account.id)
    return {"message": "Employee deleted successfully", "employee_id": employee_id}
