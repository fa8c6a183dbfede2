import logging
from typing import Any, Dict, List, Optional
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from app.core.exceptions import NotFoundError
from app.core.logging import log_user_action
from app.core.write_errors import write_error_channel
from app.models.kpi.kpi import Kpi
from app.models.kpi.monthly_kpi import MonthlyKpi
from app.schemas.kpi.kpi_schema import KpiUpdate

logger = logging.getLogger(__name__)


class KpiService:
    """Corporate KPI catalog and its monthly figures"""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ---------- Getters ----------
    async def get_kpi(self, kpi_id: str) -> Optional[Kpi]:
        result = await self.session.execute(select(Kpi).where(Kpi.id == kpi_id))
        return result.scalar_one_or_none()

    async def get_all_kpis(self) -> List[Kpi]:
        result = await self.session.execute(select(Kpi).order_by(Kpi.created_at, Kpi.id))
        return list(result.scalars().all())

    async def get_kpis(
        self,
        page_index: int = 1,
        page_size: int = 100,
        search: Optional[str] = None,
        perspective: Optional[str] = None
    ) -> Dict[str, Any]:
        """Get catalog KPIs with pagination"""
        query = select(Kpi)
        if perspective:
            query = query.where(Kpi.perspective == perspective)
        if search:
            like = f"%{search}%"
            query = query.where(
                or_(
                    Kpi.measure.ilike(like),
                    Kpi.strategic_objective.ilike(like),
                    Kpi.category.ilike(like)
                )
            )

        total = (await self.session.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0

        skip = (page_index - 1) * page_size
        result = await self.session.execute(
            query.order_by(Kpi.created_at, Kpi.id).offset(skip).limit(page_size)
        )
        return {
            "page_index": page_index,
            "page_size": page_size,
            "count": total,
            "data": result.scalars().all()
        }

    async def get_monthly_kpis(self, parent_kpi_id: Optional[str] = None) -> List[MonthlyKpi]:
        query = select(MonthlyKpi)
        if parent_kpi_id:
            query = query.where(MonthlyKpi.parent_kpi_id == parent_kpi_id)
        result = await self.session.execute(query.order_by(MonthlyKpi.parent_kpi_id, MonthlyKpi.month))
        return list(result.scalars().all())

    # ---------- Update / Delete ----------
    async def update_kpi(self, kpi_id: str, data: KpiUpdate, actor_id: Optional[str] = None) -> Kpi:
        kpi = await self.get_kpi(kpi_id)
        if not kpi:
            raise NotFoundError(f"KPI {kpi_id} not found")
        try:
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(kpi, field, value)
            await self.session.commit()
            await self.session.refresh(kpi)
        except Exception as e:
            await self.session.rollback()
            write_error_channel.report("kpi_catalog", "update", e, document_id=kpi_id, actor_id=actor_id)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating KPI")

        log_user_action(actor_id, "update", "kpi_catalog", kpi_id)
        return kpi

    async def delete_kpi(self, kpi_id: str, actor_id: Optional[str] = None) -> bool:
        kpi = await self.get_kpi(kpi_id)
        if not kpi:
            return False
        try:
            await self.session.delete(kpi)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            write_error_channel.report("kpi_catalog", "delete", e, document_id=kpi_id, actor_id=actor_id)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting KPI")

        log_user_action(actor_id, "delete", "kpi_catalog", kpi_id)
        logger.info(f"KPI deleted: {kpi_id}")
        return True
