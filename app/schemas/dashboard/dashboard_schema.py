from pydantic import BaseModel
from typing import List

from app.schemas.kpi.kpi_schema import KpiResponse

class DepartmentKpiCount(BaseModel):
    department: str
    cascaded_kpis: int

class DashboardSummary(BaseModel):
    summary_kpis: List[KpiResponse]
    placeholders: int  # empty summary slots when fewer than four KPIs are imported
    departments: List[DepartmentKpiCount]
    total_kpis: int
    total_employees: int
