import logging
from typing import List, Optional
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.core.exceptions import InvalidStatusTransitionError, NotFoundError, PermissionDeniedError, ValidationError
from app.core.logging import log_user_action
from app.core.write_errors import write_error_channel
from app.models.kpi.individual_kpi import IndividualKpi
from app.models.shared.enums import IndividualKpiStatus

logger = logging.getLogger(__name__)

# statuses from which an employee may (re)state a commitment
REVIEWABLE_STATUSES = {
    IndividualKpiStatus.DRAFT,
    IndividualKpiStatus.COMMITTED,
    IndividualKpiStatus.REJECTED,
}


class PortfolioService:
    """Individual KPIs as seen by the employee they are assigned to"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_portfolio(self, employee_id: str) -> List[IndividualKpi]:
        result = await self.session.execute(
            select(IndividualKpi)
            .where(IndividualKpi.employee_id == employee_id)
            .order_by(IndividualKpi.created_at, IndividualKpi.id)
        )
        return list(result.scalars().all())

    async def get_individual_kpi(self, kpi_id: str) -> IndividualKpi:
        kpi = await self.session.get(IndividualKpi, kpi_id)
        if kpi is None:
            raise NotFoundError(f"Individual KPI {kpi_id} not found")
        return kpi

    async def _get_owned(self, kpi_id: str, employee_id: Optional[str]) -> IndividualKpi:
        kpi = await self.get_individual_kpi(kpi_id)
        if employee_id is not None and kpi.employee_id != employee_id:
            raise PermissionDeniedError("This KPI is not assigned to you")
        return kpi

    async def _set_status(
        self,
        kpi: IndividualKpi,
        new_status: IndividualKpiStatus,
        actor_id: Optional[str],
        notes: Optional[str] = None,
        rejection_reason: Optional[str] = None,
    ) -> IndividualKpi:
        try:
            kpi.status = new_status
            if notes is not None:
                kpi.notes = notes
            kpi.rejection_reason = rejection_reason
            await self.session.commit()
            await self.session.refresh(kpi)
        except Exception as e:
            await self.session.rollback()
            write_error_channel.report("individual_kpis", "update", e, document_id=kpi.id, actor_id=actor_id)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating KPI status")

        log_user_action(actor_id, new_status.value, "individual_kpis", kpi.id)
        logger.info(f"Individual KPI {kpi.id} is now {new_status.value}")
        return kpi

    async def confirm_commitment(self, kpi_id: str, notes: Optional[str] = None, employee_id: Optional[str] = None) -> IndividualKpi:
        kpi = await self._get_owned(kpi_id, employee_id)
        if kpi.status not in REVIEWABLE_STATUSES:
            raise InvalidStatusTransitionError(f"Cannot commit to a KPI in status {kpi.status.value}")
        return await self._set_status(kpi, IndividualKpiStatus.COMMITTED, employee_id, notes=notes or "")

    async def reject_commitment(self, kpi_id: str, reason: str, employee_id: Optional[str] = None) -> IndividualKpi:
        if not reason or not reason.strip():
            raise ValidationError("A reason is required to reject a KPI")
        kpi = await self._get_owned(kpi_id, employee_id)
        if kpi.status not in REVIEWABLE_STATUSES:
            raise InvalidStatusTransitionError(f"Cannot reject a KPI in status {kpi.status.value}")
        reason = reason.strip()
        return await self._set_status(kpi, IndividualKpiStatus.REJECTED, employee_id, notes=reason, rejection_reason=reason)

    async def start_progress(self, kpi_id: str, actor_id: Optional[str] = None) -> IndividualKpi:
        """Manager action once the commitment is agreed"""
        kpi = await self.get_individual_kpi(kpi_id)
        if kpi.status != IndividualKpiStatus.AGREED:
            raise InvalidStatusTransitionError(f"Only Agreed KPIs can be started (current: {kpi.status.value})")
        return await self._set_status(kpi, IndividualKpiStatus.IN_PROGRESS, actor_id)

    async def list_commitment_requests(self) -> List[IndividualKpi]:
        result = await self.session.execute(
            select(IndividualKpi)
            .where(IndividualKpi.status == IndividualKpiStatus.COMMITTED)
            .order_by(IndividualKpi.updated_at, IndividualKpi.id)
        )
        return list(result.scalars().all())

    async def agree_commitment(self, kpi_id: str, actor_id: Optional[str] = None) -> IndividualKpi:
        kpi = await self.get_individual_kpi(kpi_id)
        if kpi.status != IndividualKpiStatus.COMMITTED:
            raise InvalidStatusTransitionError(f"Only Committed KPIs can be agreed (current: {kpi.status.value})")
        return await self._set_status(kpi, IndividualKpiStatus.AGREED, actor_id)
