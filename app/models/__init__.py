from app.models.auth.account import LoginAccount
from app.models.auth.user import AppUser
from app.models.hr.employee import Employee
from app.models.kpi.kpi import Kpi
from app.models.kpi.cascaded_kpi import CascadedKpi
from app.models.kpi.individual_kpi import IndividualKpi
from app.models.kpi.submission import KpiSubmission
from app.models.kpi.monthly_kpi import MonthlyKpi
from app.models.organization.department import Department
from app.models.organization.position import Position
from app.models.organization.role_definition import RoleDefinition
from app.models.system.app_setting import AppSetting


__all__ = [
    "LoginAccount",
    "AppUser",
    "Employee",
    "Kpi",
    "CascadedKpi",
    "IndividualKpi",
    "KpiSubmission",
    "MonthlyKpi",
    "Department",
    "Position",
    "RoleDefinition",
    "AppSetting",
]
