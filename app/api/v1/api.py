from fastapi import APIRouter
from app.api.v1.endpoints.auth import login, users
from app.api.v1.endpoints.approval import approvals
from app.api.v1.endpoints.dashboard import dashboard
from app.api.v1.endpoints.data_import import imports
from app.api.v1.endpoints.hr import employees
from app.api.v1.endpoints.kpi import cascade, catalog, portfolio, submissions
from app.api.v1.endpoints.organization import master_data
from app.api.v1.endpoints.reports import reports
from app.api.v1.endpoints.system import settings, write_errors

api_router = APIRouter()

# Authentication routes
api_router.include_router(login.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])

# Data import
api_router.include_router(imports.router, prefix="/imports", tags=["Import"])

# KPI routes
api_router.include_router(catalog.router, prefix="/kpis", tags=["KPI"])
api_router.include_router(cascade.router, prefix="/cascade", tags=["KPI"])
api_router.include_router(portfolio.router, prefix="/portfolio", tags=["KPI"])
api_router.include_router(submissions.router, prefix="/submissions", tags=["KPI"])
api_router.include_router(approvals.router, prefix="/approvals", tags=["Approval"])

# Organization routes
api_router.include_router(employees.router, prefix="/employees", tags=["Organization"])
api_router.include_router(master_data.router, prefix="/master-data", tags=["Organization"])

# Reporting routes
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])

# System routes
api_router.include_router(settings.router, prefix="/settings", tags=["System"])
api_router.include_router(write_errors.router, prefix="/system/write-errors", tags=["System"])
