# app/services/reports/report_service.py
import json
import logging
from typing import Dict, Any, List, Optional
from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.models.hr.employee import Employee
from app.models.kpi.cascaded_kpi import CascadedKpi
from app.models.kpi.kpi import Kpi
from app.models.kpi.monthly_kpi import MonthlyKpi
from app.services.kpi.cascade_service import list_departments
from app.utils.data_exporter import DataExportService, achievement_badge

logger = logging.getLogger(__name__)

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

TOP_DEPARTMENTS = 3

REPORT_EXPORT_FIELDS = {
    "measure": "KPI",
    "department": "Department",
    "weight": "Weight (%)",
    "month_target": "Month Target",
    "month_actual": "Month Actual",
    "month_achievement": "Month Ach. %",
    "ytd_target": "YTD Target",
    "ytd_actual": "YTD Actual",
    "ytd_achievement": "YTD Ach. %",
}


def achievement(actual: float, target: float) -> float:
    """actual / target as a percentage; 0 when there is no target"""
    return (actual / target) * 100 if target > 0 else 0.0


def current_report_month(monthly: List[Any], today: Optional[date] = None) -> int:
    """Latest month (1-12) that has an actual above zero, else today's month"""
    months = [m.month for m in monthly if (m.actual or 0) > 0 and m.month]
    if months:
        return max(months)
    return (today or date.today()).month


def _ytd(monthly: List[Any], month: int) -> Dict[str, float]:
    upto = [m for m in monthly if m.month <= month]
    return {
        "target": sum(m.target or 0 for m in upto),
        "actual": sum(m.actual or 0 for m in upto),
    }


def build_report_rows(
    cascaded: List[Any],
    monthly: List[Any],
    month: int,
    measures: Optional[Dict[str, str]] = None
) -> List[Dict[str, Any]]:
    """One row per cascaded KPI with the month's and year-to-date figures"""
    measures = measures or {}
    by_parent: Dict[str, List[Any]] = {}
    for m in monthly:
        by_parent.setdefault(m.parent_kpi_id, []).append(m)

    rows = []
    for kpi in cascaded:
        figures = by_parent.get(kpi.corporate_kpi_id, [])
        this_month = next((m for m in figures if m.month == month), None)
        month_target = (this_month.target or 0) if this_month else 0.0
        month_actual = (this_month.actual or 0) if this_month else 0.0
        ytd = _ytd(figures, month)
        month_achievement = achievement(month_actual, month_target)
        ytd_achievement = achievement(ytd["actual"], ytd["target"])
        rows.append({
            "cascaded_kpi_id": kpi.id,
            "corporate_kpi_id": kpi.corporate_kpi_id,
            "measure": measures.get(kpi.corporate_kpi_id),
            "department": kpi.department,
            "weight": kpi.weight or 0,
            "month_target": float(month_target),
            "month_actual": float(month_actual),
            "month_achievement": month_achievement,
            "month_badge": achievement_badge(month_achievement),
            "ytd_target": float(ytd["target"]),
            "ytd_actual": float(ytd["actual"]),
            "ytd_achievement": ytd_achievement,
            "ytd_badge": achievement_badge(ytd_achievement),
        })
    return rows


def rank_departments(departments: List[str], rows: List[Dict[str, Any]], limit: int = TOP_DEPARTMENTS) -> List[Dict[str, Any]]:
    """Weighted YTD achievement per department, best first"""
    ranking = []
    for department in departments:
        dept_rows = [r for r in rows if r["department"] == department]
        total_weight = sum(r["weight"] for r in dept_rows)
        weighted = sum(r["ytd_achievement"] * r["weight"] for r in dept_rows)
        score = weighted / total_weight if total_weight > 0 else 0.0
        ranking.append({"department": department, "achievement": score, "badge": achievement_badge(score)})
    ranking.sort(key=lambda r: r["achievement"], reverse=True)
    return ranking[:limit]


class ReportService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.exporter = DataExportService()

    async def _load(self) -> Dict[str, Any]:
        employees = (await self.session.execute(select(Employee).order_by(Employee.created_at, Employee.id))).scalars().all()
        cascaded = (await self.session.execute(select(CascadedKpi).order_by(CascadedKpi.created_at, CascadedKpi.id))).scalars().all()
        monthly = (await self.session.execute(select(MonthlyKpi))).scalars().all()
        catalog = (await self.session.execute(select(Kpi))).scalars().all()
        return {
            "employees": list(employees),
            "cascaded": list(cascaded),
            "monthly": list(monthly),
            "measures": {k.id: k.measure for k in catalog},
        }

    async def get_monthly_report(self, month: Optional[int] = None) -> Dict[str, Any]:
        data = await self._load()
        report_month = month or current_report_month(data["monthly"])
        rows = build_report_rows(data["cascaded"], data["monthly"], report_month, data["measures"])
        departments = list_departments(data["employees"])
        logger.info(f"Monthly report for {MONTH_NAMES[report_month - 1]}: {len(rows)} rows")
        return {
            "month": report_month,
            "month_name": MONTH_NAMES[report_month - 1],
            "rows": rows,
            "top_departments": rank_departments(departments, rows),
        }

    async def build_summary_input(self, month: Optional[int] = None) -> str:
        """JSON handed to the executive summary flow"""
        data = await self._load()
        report_month = month or current_report_month(data["monthly"])
        rows = build_report_rows(data["cascaded"], data["monthly"], report_month, data["measures"])
        payload = {
            "reportMonth": MONTH_NAMES[report_month - 1],
            "departments": list_departments(data["employees"]),
            "cascadedKpis": [
                {
                    "id": row["cascaded_kpi_id"],
                    "corporateKpiId": row["corporate_kpi_id"],
                    "measure": row["measure"],
                    "department": row["department"],
                    "weight": row["weight"],
                    "ytdTarget": row["ytd_target"],
                    "ytdActual": row["ytd_actual"],
                }
                for row in rows
            ],
        }
        return json.dumps(payload, ensure_ascii=False, indent=2)

    async def export_monthly_report(self, export_format: str, month: Optional[int] = None):
        report = await self.get_monthly_report(month)
        data = self.exporter.prepare_data_for_export(report["rows"], REPORT_EXPORT_FIELDS)
        filename = f"kpi_report_{report['month_name'].lower()}_{date.today().isoformat()}"
        columns = list(REPORT_EXPORT_FIELDS.values())
        if export_format == "excel":
            return self.exporter.export_to_excel(data, filename, sheet_name=report["month_name"], columns=columns)
        return self.exporter.export_to_csv(data, filename, columns=columns)
