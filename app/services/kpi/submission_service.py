import logging
import uuid
from typing import Any, Dict, List, Optional
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.core.exceptions import InvalidStatusTransitionError, NotFoundError, PermissionDeniedError
from app.core.logging import log_user_action
from app.core.write_errors import write_error_channel
from app.models.auth.account import LoginAccount
from app.models.hr.employee import Employee
from app.models.kpi.individual_kpi import IndividualKpi
from app.models.kpi.submission import KpiSubmission
from app.models.shared.enums import IndividualKpiStatus, SubmissionStatus
from app.schemas.kpi.cascade_schema import IndividualKpiResponse
from app.schemas.kpi.submission_schema import SubmissionCreate

logger = logging.getLogger(__name__)

UNASSIGNED_DEPARTMENT = "Unassigned"


class SubmissionService:
    """Employee side of actual-value submissions"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_submissions_by(self, employee_id: str) -> List[KpiSubmission]:
        result = await self.session.execute(
            select(KpiSubmission)
            .where(KpiSubmission.submitted_by == employee_id)
            .order_by(KpiSubmission.submission_date.desc(), KpiSubmission.id)
        )
        return list(result.scalars().all())

    async def list_submittable(self, employee_id: str) -> Dict[str, Any]:
        """In-progress KPIs of the employee, flagged with whether a value was already submitted"""
        result = await self.session.execute(
            select(IndividualKpi)
            .where(
                IndividualKpi.employee_id == employee_id,
                IndividualKpi.status == IndividualKpiStatus.IN_PROGRESS
            )
            .order_by(IndividualKpi.created_at, IndividualKpi.id)
        )
        in_progress = list(result.scalars().all())
        submissions = await self.get_submissions_by(employee_id)
        submitted_ids = {s.kpi_id for s in submissions}

        kpis = [
            {"kpi": IndividualKpiResponse.model_validate(k), "submitted": k.id in submitted_ids}
            for k in in_progress
        ]
        submitted_count = sum(1 for item in kpis if item["submitted"])
        return {
            "kpis": kpis,
            "stats": {
                "in_progress": len(in_progress),
                "needs_submission": len(in_progress) - submitted_count,
                "submitted": len(submissions),
            },
            "submissions": submissions,
        }

    async def submit(self, employee_id: str, data: SubmissionCreate) -> KpiSubmission:
        kpi = await self.session.get(IndividualKpi, data.kpi_id)
        if kpi is None:
            raise NotFoundError(f"Individual KPI {data.kpi_id} not found")
        if kpi.employee_id != employee_id:
            raise PermissionDeniedError("This KPI is not assigned to you")
        if kpi.status != IndividualKpiStatus.IN_PROGRESS:
            raise InvalidStatusTransitionError(f"Only In-Progress KPIs accept submissions (current: {kpi.status.value})")

        account = await self.session.get(LoginAccount, employee_id)
        employee = await self.session.get(Employee, employee_id)
        department = employee.department if employee and employee.department else UNASSIGNED_DEPARTMENT
        if account and account.display_name:
            submitter_name = account.display_name
        else:
            submitter_name = employee.name if employee else employee_id

        submission = KpiSubmission(
            id=uuid.uuid4().hex,
            kpi_id=kpi.id,
            kpi_measure=kpi.display_measure,
            submitted_by=employee_id,
            submitter_name=submitter_name,
            department=department,
            actual_value=data.actual_value,
            target_value=kpi.display_target,
            notes=data.notes or "",
            status=SubmissionStatus.MANAGER_REVIEW,
        )
        try:
            self.session.add(submission)
            await self.session.commit()
            await self.session.refresh(submission)
        except Exception as e:
            await self.session.rollback()
            write_error_channel.report("kpi_submissions", "create", e, document_id=kpi.id, actor_id=employee_id)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error submitting KPI data")

        log_user_action(employee_id, "submit", "kpi_submissions", submission.id)
        logger.info(f"Submission {submission.id} for KPI {kpi.id} by {employee_id}")
        return submission
