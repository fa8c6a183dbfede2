from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import require_menu_access
from app.core.database import get_async_session
from app.models.auth.account import LoginAccount
from app.schemas.kpi.submission_schema import SubmissionCreate, SubmissionResponse, SubmittableResponse
from app.services.kpi.submission_service import SubmissionService

router = APIRouter()

can_submit = require_menu_access("/submit")

@router.get("/", response_model=SubmittableResponse)
async def get_submittable_kpis(
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_submit)
):
    """In-progress KPIs of the signed-in employee and their submissions"""
    service = SubmissionService(session)
    return await service.list_submittable(current_account.id)

@router.post("/", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def submit_kpi_value(
    data: SubmissionCreate,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_submit)
):
    """Submit an actual value for approval"""
    service = SubmissionService(session)
    return await service.submit(current_account.id, data)
