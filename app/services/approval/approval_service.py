import logging
from typing import Any, Dict, List, Optional
from fastapi import HTTPException, status
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidStatusTransitionError, NotFoundError
from app.core.logging import log_user_action
from app.core.write_errors import write_error_channel
from app.models.kpi.submission import KpiSubmission
from app.models.shared.enums import SubmissionStatus

logger = logging.getLogger(__name__)

# approve moves a submission one step along this chain
NEXT_STATUS = {
    SubmissionStatus.MANAGER_REVIEW: SubmissionStatus.UPPER_MANAGER_APPROVAL,
    SubmissionStatus.UPPER_MANAGER_APPROVAL: SubmissionStatus.CLOSED,
}

OPEN_STATUSES = list(NEXT_STATUS)
FINAL_STATUSES = {SubmissionStatus.CLOSED, SubmissionStatus.REJECTED}


class ApprovalService:
    def __init__(self, session: AsyncSession):
        self.session = session

    # region ========== Listing ==========

    async def get_submission(self, submission_id: str) -> KpiSubmission:
        submission = await self.session.get(KpiSubmission, submission_id)
        if submission is None:
            raise NotFoundError(f"Submission {submission_id} not found")
        return submission

    async def list_submissions(
        self,
        status_filter: Optional[SubmissionStatus] = None,
        department: Optional[str] = None,
        page_index: int = 1,
        page_size: int = 100
    ) -> Dict[str, Any]:
        """Submissions newest first, optionally filtered"""
        conditions = []
        if status_filter:
            conditions.append(KpiSubmission.status == status_filter)
        if department:
            conditions.append(KpiSubmission.department == department)

        query = select(KpiSubmission).where(*conditions)
        total = (await self.session.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0

        skip = (page_index - 1) * page_size
        result = await self.session.execute(
            query.order_by(KpiSubmission.submission_date.desc(), KpiSubmission.id).offset(skip).limit(page_size)
        )
        return {
            "page_index": page_index,
            "page_size": page_size,
            "count": total,
            "data": result.scalars().all()
        }

    async def submission_stats(self) -> Dict[str, Any]:
        result = await self.session.execute(
            select(KpiSubmission.status, func.count(KpiSubmission.id)).group_by(KpiSubmission.status)
        )
        counts = {s.value: 0 for s in SubmissionStatus}
        for submission_status, count in result.all():
            counts[SubmissionStatus(submission_status).value] = count
        return {"total": sum(counts.values()), "by_status": counts}

    # endregion

    # region ========== Decisions ==========

    async def _write_status(self, submissions: List[KpiSubmission], actor_id: Optional[str]):
        try:
            await self.session.commit()
            for submission in submissions:
                await self.session.refresh(submission)
        except Exception as e:
            await self.session.rollback()
            ids = ",".join(s.id for s in submissions)
            write_error_channel.report("kpi_submissions", "update", e, document_id=ids, actor_id=actor_id)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error updating submission status"
            )

    @staticmethod
    def _ensure_open(submission: KpiSubmission):
        if submission.status in FINAL_STATUSES:
            raise InvalidStatusTransitionError(
                f"Submission {submission.id} is already {submission.status.value}"
            )

    async def approve(self, submission_id: str, actor_id: Optional[str] = None) -> KpiSubmission:
        submission = await self.get_submission(submission_id)
        self._ensure_open(submission)
        previous = submission.status
        submission.status = NEXT_STATUS[previous]
        submission.rejection_reason = None
        await self._write_status([submission], actor_id)

        log_user_action(actor_id, "approve", "kpi_submissions", submission_id)
        logger.info(f"Submission {submission_id}: {previous.value} -> {submission.status.value}")
        return submission

    async def reject(self, submission_id: str, reason: Optional[str] = None, actor_id: Optional[str] = None) -> KpiSubmission:
        submission = await self.get_submission(submission_id)
        self._ensure_open(submission)
        submission.status = SubmissionStatus.REJECTED
        submission.rejection_reason = (reason or "").strip() or None
        await self._write_status([submission], actor_id)

        log_user_action(actor_id, "reject", "kpi_submissions", submission_id)
        logger.info(f"Submission {submission_id} rejected by {actor_id}")
        return submission

    async def _open_submissions(self) -> List[KpiSubmission]:
        result = await self.session.execute(
            select(KpiSubmission)
            .where(KpiSubmission.status.in_(OPEN_STATUSES))
            .order_by(KpiSubmission.submission_date, KpiSubmission.id)
        )
        return list(result.scalars().all())

    async def bulk_approve(self, actor_id: Optional[str] = None) -> Dict[str, Any]:
        """Advance every open submission by one step"""
        submissions = await self._open_submissions()
        for submission in submissions:
            submission.status = NEXT_STATUS[submission.status]
        if submissions:
            await self._write_status(submissions, actor_id)
        log_user_action(actor_id, "bulk_approve", "kpi_submissions", len(submissions))
        return {"updated": [s.id for s in submissions], "count": len(submissions)}

    async def bulk_reject(self, reason: Optional[str] = None, actor_id: Optional[str] = None) -> Dict[str, Any]:
        submissions = await self._open_submissions()
        for submission in submissions:
            submission.status = SubmissionStatus.REJECTED
            submission.rejection_reason = (reason or "").strip() or None
        if submissions:
            await self._write_status(submissions, actor_id)
        log_user_action(actor_id, "bulk_reject", "kpi_submissions", len(submissions))
        return {"updated": [s.id for s in submissions], "count": len(submissions)}

    # endregion
