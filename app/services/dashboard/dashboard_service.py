import json
import logging
from typing import Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.models.hr.employee import Employee
from app.models.kpi.cascaded_kpi import CascadedKpi
from app.models.kpi.kpi import Kpi
from app.schemas.kpi.kpi_schema import KpiResponse
from app.services.kpi.cascade_service import list_departments

logger = logging.getLogger(__name__)

SUMMARY_CARD_COUNT = 4

class DashboardService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_summary(self) -> Dict[str, Any]:
        """Summary cards plus cascaded KPI counts per department"""
        catalog = (await self.session.execute(select(Kpi).order_by(Kpi.created_at, Kpi.id))).scalars().all()
        employees = (await self.session.execute(select(Employee).order_by(Employee.created_at, Employee.id))).scalars().all()

        counts_result = await self.session.execute(
            select(CascadedKpi.department, func.count(CascadedKpi.id)).group_by(CascadedKpi.department)
        )
        cascaded_counts = dict(counts_result.all())

        summary_kpis = list(catalog[:SUMMARY_CARD_COUNT])
        return {
            "summary_kpis": summary_kpis,
            "placeholders": SUMMARY_CARD_COUNT - len(summary_kpis),
            "departments": [
                {"department": department, "cascaded_kpis": cascaded_counts.get(department, 0)}
                for department in list_departments(employees)
            ],
            "total_kpis": len(catalog),
            "total_employees": len(employees),
        }

    async def build_insights_input(self) -> str:
        """Catalog as JSON for the insights flow"""
        catalog = (await self.session.execute(select(Kpi).order_by(Kpi.created_at, Kpi.id))).scalars().all()
        payload = [
            KpiResponse.model_validate(kpi).model_dump(exclude={"created_at", "updated_at"}, exclude_none=True)
            for kpi in catalog
        ]
        return json.dumps(payload, ensure_ascii=False, indent=2)
