from pydantic import BaseModel
from typing import List, Literal, Optional

AchievementBadge = Literal["success", "warning", "destructive"]

class MonthlyReportRow(BaseModel):
    cascaded_kpi_id: str
    corporate_kpi_id: str
    measure: Optional[str] = None
    department: str
    weight: int
    month_target: float
    month_actual: float
    month_achievement: float
    month_badge: AchievementBadge
    ytd_target: float
    ytd_actual: float
    ytd_achievement: float
    ytd_badge: AchievementBadge

class DepartmentRanking(BaseModel):
    department: str
    achievement: float
    badge: AchievementBadge

class MonthlyReportResponse(BaseModel):
    month: int
    month_name: str
    rows: List[MonthlyReportRow]
    top_departments: List[DepartmentRanking]
