from enum import Enum

# Enums
class Role(str, Enum):
    ADMIN = "Admin"
    VP = "VP"
    AVP = "AVP"
    MANAGER = "Manager"
    EMPLOYEE = "Employee"

class MenuRoute(str, Enum):
    DASHBOARD = "/dashboard"
    CASCADE = "/cascade"
    PORTFOLIO = "/portfolio"
    SUBMIT = "/submit"
    APPROVALS = "/approvals"
    REPORTS = "/reports"
    KPI_IMPORT = "/kpi-import"
    MASTER_DATA = "/master-data"
    USER_MANAGEMENT = "/user-management"
    SETTINGS = "/settings"

class IndividualKpiType(str, Enum):
    CASCADED = "cascaded"
    COMMITTED = "committed"

class IndividualKpiStatus(str, Enum):
    DRAFT = "Draft"
    COMMITTED = "Committed"
    AGREED = "Agreed"
    IN_PROGRESS = "In-Progress"
    MANAGER_REVIEW = "Manager Review"
    UPPER_MANAGER_APPROVAL = "Upper Manager Approval"
    EMPLOYEE_ACKNOWLEDGED = "Employee Acknowledged"
    CLOSED = "Closed"
    REJECTED = "Rejected"

class SubmissionStatus(str, Enum):
    MANAGER_REVIEW = "Manager Review"
    UPPER_MANAGER_APPROVAL = "Upper Manager Approval"
    CLOSED = "Closed"
    REJECTED = "Rejected"

class ImportCollection(str, Enum):
    KPI_CATALOG = "kpi_catalog"
    DEPARTMENTS = "departments"
    POSITIONS = "positions"
    ROLES = "roles"
    EMPLOYEES = "employees"
    MONTHLY_KPIS = "monthly_kpis"

class InsightIcon(str, Enum):
    TRENDING_UP = "TrendingUp"
    TRENDING_DOWN = "TrendingDown"
    ALERT_TRIANGLE = "AlertTriangle"

class ExportFormat(str, Enum):
    CSV = "csv"
    EXCEL = "excel"
