from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import require_menu_access
from app.core.database import get_async_session
from app.models.auth.account import LoginAccount
from app.models.shared.enums import SubmissionStatus
from app.schemas.common.pagination import PaginatedResponse
from app.schemas.kpi.cascade_schema import IndividualKpiResponse
from app.schemas.kpi.submission_schema import (
    BulkActionResult,
    SubmissionRejectRequest,
    SubmissionResponse,
    SubmissionStats,
)
from app.services.approval.approval_service import ApprovalService
from app.services.kpi.portfolio_service import PortfolioService

router = APIRouter()

can_approve = require_menu_access("/approvals")

# region ========== Submissions ==========

@router.get("/submissions", response_model=PaginatedResponse[SubmissionResponse])
async def get_submissions(
    status: Optional[SubmissionStatus] = Query(None),
    department: Optional[str] = Query(None),
    page_index: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_approve)
):
    """KPI submissions, newest first"""
    service = ApprovalService(session)
    return await service.list_submissions(status, department, page_index, page_size)

@router.get("/submissions/stats", response_model=SubmissionStats)
async def get_submission_stats(
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_approve)
):
    """Submission count per status"""
    service = ApprovalService(session)
    return await service.submission_stats()

@router.post("/submissions/bulk-approve", response_model=BulkActionResult)
async def bulk_approve(
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_approve)
):
    """Advance every open submission one step"""
    service = ApprovalService(session)
    return await service.bulk_approve(actor_id=current_account.id)

@router.post("/submissions/bulk-reject", response_model=BulkActionResult)
async def bulk_reject(
    data: Optional[SubmissionRejectRequest] = None,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_approve)
):
    """Reject every open submission"""
    service = ApprovalService(session)
    return await service.bulk_reject(data.reason if data else None, actor_id=current_account.id)

@router.post("/submissions/{submission_id}/approve", response_model=SubmissionResponse)
async def approve_submission(
    submission_id: str,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_approve)
):
    """Approve: Manager Review -> Upper Manager Approval -> Closed"""
    service = ApprovalService(session)
    return await service.approve(submission_id, actor_id=current_account.id)

@router.post("/submissions/{submission_id}/reject", response_model=SubmissionResponse)
async def reject_submission(
    submission_id: str,
    data: Optional[SubmissionRejectRequest] = None,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_approve)
):
    """Reject a submission"""
    service = ApprovalService(session)
    return await service.reject(submission_id, data.reason if data else None, actor_id=current_account.id)

# endregion

# region ========== Commitments ==========

@router.get("/commitments", response_model=List[IndividualKpiResponse])
async def get_commitment_requests(
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_approve)
):
    """Individual KPIs employees have committed to, awaiting agreement"""
    service = PortfolioService(session)
    return await service.list_commitment_requests()

@router.post("/commitments/{kpi_id}/agree", response_model=IndividualKpiResponse)
async def agree_commitment(
    kpi_id: str,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_approve)
):
    """Committed -> Agreed"""
    service = PortfolioService(session)
    return await service.agree_commitment(kpi_id, actor_id=current_account.id)

@router.post("/commitments/{kpi_id}/start", response_model=IndividualKpiResponse)
async def start_progress(
    kpi_id: str,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(can_approve)
):
    """Agreed -> In-Progress; the employee can then submit values"""
    service = PortfolioService(session)
    return await service.start_progress(kpi_id, actor_id=current_account.id)

# endregion
