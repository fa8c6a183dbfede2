from fastapi import APIRouter, Depends
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import require_menu_access
from app.core.database import get_async_session
from app.models.auth.account import LoginAccount
from app.schemas.organization.master_data_schema import (
    DepartmentResponse,
    MasterDataResponse,
    PositionResponse,
    RoleDefinitionResponse,
)
from app.services.organization.master_data_service import MasterDataService

router = APIRouter()

can_view = require_menu_access("/master-data")

@router.get("/", response_model=MasterDataResponse)
async def get_master_data(
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_view)
):
    """Departments, positions and roles together"""
    return await MasterDataService(session).get_master_data()

@router.get("/departments", response_model=List[DepartmentResponse])
async def get_departments(
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_view)
):
    return await MasterDataService(session).get_departments()

@router.get("/positions", response_model=List[PositionResponse])
async def get_positions(
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_view)
):
    return await MasterDataService(session).get_positions()

@router.get("/roles", response_model=List[RoleDefinitionResponse])
async def get_roles(
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_view)
):
    return await MasterDataService(session).get_roles()
