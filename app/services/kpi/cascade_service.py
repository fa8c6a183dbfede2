import logging
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.core.logging import log_user_action
from app.core.write_errors import write_error_channel
from app.models.hr.employee import Employee
from app.models.kpi.cascaded_kpi import CascadedKpi
from app.models.kpi.individual_kpi import IndividualKpi
from app.models.kpi.kpi import Kpi
from app.models.shared.enums import IndividualKpiStatus, IndividualKpiType
from app.schemas.kpi.cascade_schema import (
    AssignKpisRequest,
    CascadeRequest,
    CascadedKpiResponse,
    IndividualKpiResponse,
)
from app.schemas.kpi.kpi_schema import KpiResponse

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"


def group_by_perspective(kpis: Iterable[Any]) -> Dict[str, List[Any]]:
    """
    Group catalog KPIs by perspective, keeping first-seen perspective order.

    KPIs without a perspective land in "Uncategorized". Accepts ORM objects or dicts.
    """
    groups: Dict[str, List[Any]] = {}
    for kpi in kpis:
        perspective = kpi.get("perspective") if isinstance(kpi, dict) else getattr(kpi, "perspective", None)
        key = perspective.strip() if isinstance(perspective, str) and perspective.strip() else UNCATEGORIZED
        groups.setdefault(key, []).append(kpi)
    return groups


def _distinct(values: Iterable[Optional[str]]) -> List[str]:
    seen: Dict[str, None] = {}
    for value in values:
        if value and value.strip():
            seen.setdefault(value.strip(), None)
    return list(seen)


def list_departments(employees: Iterable[Any]) -> List[str]:
    return _distinct(getattr(e, "department", None) for e in employees)


def list_managers(employees: Iterable[Any]) -> List[str]:
    return _distinct(getattr(e, "manager", None) for e in employees)


def committed_kpi_id() -> str:
    return f"committed-{int(time.time() * 1000)}"


class CascadeService:
    def __init__(self, session: AsyncSession):
        self.session = session

    # ---------- Getters ----------
    async def get_catalog(self) -> List[Kpi]:
        result = await self.session.execute(select(Kpi).order_by(Kpi.created_at, Kpi.id))
        return list(result.scalars().all())

    async def get_employees(self) -> List[Employee]:
        result = await self.session.execute(select(Employee).order_by(Employee.created_at, Employee.id))
        return list(result.scalars().all())

    async def get_cascaded_kpis(self, department: Optional[str] = None) -> List[CascadedKpi]:
        query = select(CascadedKpi)
        if department:
            query = query.where(CascadedKpi.department == department)
        result = await self.session.execute(query.order_by(CascadedKpi.created_at, CascadedKpi.id))
        return list(result.scalars().all())

    async def get_individual_kpis(self, employee_id: Optional[str] = None) -> List[IndividualKpi]:
        query = select(IndividualKpi)
        if employee_id:
            query = query.where(IndividualKpi.employee_id == employee_id)
        result = await self.session.execute(query.order_by(IndividualKpi.created_at, IndividualKpi.id))
        return list(result.scalars().all())

    def _cascaded_response(self, cascaded: CascadedKpi, catalog: Dict[str, Kpi]) -> CascadedKpiResponse:
        corporate = catalog.get(cascaded.corporate_kpi_id)
        return CascadedKpiResponse(
            id=cascaded.id,
            corporate_kpi_id=cascaded.corporate_kpi_id,
            department=cascaded.department,
            department_target=cascaded.department_target,
            weight=cascaded.weight,
            measure=corporate.measure if corporate else None,
            perspective=corporate.perspective if corporate else None,
            created_at=cascaded.created_at,
        )

    async def list_cascaded(self, department: Optional[str] = None) -> List[CascadedKpiResponse]:
        catalog = {k.id: k for k in await self.get_catalog()}
        return [self._cascaded_response(c, catalog) for c in await self.get_cascaded_kpis(department)]

    # ---------- Corporate → Department ----------
    async def cascade_kpi(self, kpi_id: str, data: CascadeRequest, actor_id: Optional[str] = None) -> List[CascadedKpiResponse]:
        """Deploy a corporate KPI to each selected department; re-cascading replaces target and weight"""
        kpi = (await self.session.execute(select(Kpi).where(Kpi.id == kpi_id))).scalar_one_or_none()
        if kpi is None:
            raise NotFoundError(f"KPI {kpi_id} not found")

        try:
            existing = {
                c.department: c
                for c in (await self.session.execute(
                    select(CascadedKpi).where(
                        CascadedKpi.corporate_kpi_id == kpi_id,
                        CascadedKpi.department.in_(data.departments)
                    )
                )).scalars().all()
            }
            saved = []
            for department in data.departments:
                cascaded = existing.get(department)
                if cascaded is None:
                    cascaded = CascadedKpi(
                        id=uuid.uuid4().hex,
                        corporate_kpi_id=kpi_id,
                        department=department,
                    )
                    self.session.add(cascaded)
                cascaded.department_target = data.department_target
                cascaded.weight = data.weight
                saved.append(cascaded)

            await self.session.commit()
            for cascaded in saved:
                await self.session.refresh(cascaded)
        except Exception as e:
            await self.session.rollback()
            write_error_channel.report("cascaded_kpis", "upsert", e, document_id=kpi_id, actor_id=actor_id)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error cascading KPI")

        log_user_action(actor_id, "cascade", "kpi_catalog", kpi_id)
        logger.info(f"KPI {kpi_id} cascaded to {', '.join(data.departments)}")
        return [self._cascaded_response(c, {kpi.id: kpi}) for c in saved]

    async def delete_cascaded_kpi(self, cascaded_id: str, actor_id: Optional[str] = None) -> bool:
        cascaded = await self.session.get(CascadedKpi, cascaded_id)
        if cascaded is None:
            return False
        try:
            await self.session.delete(cascaded)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            write_error_channel.report("cascaded_kpis", "delete", e, document_id=cascaded_id, actor_id=actor_id)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting cascaded KPI")
        log_user_action(actor_id, "delete", "cascaded_kpis", cascaded_id)
        return True

    # ---------- Department → Individual ----------
    async def assign_individual_kpis(
        self,
        employee_id: str,
        data: AssignKpisRequest,
        actor_id: Optional[str] = None
    ) -> List[IndividualKpi]:
        """
        Assign cascaded and committed KPIs to one employee.

        Cascaded items must reference a KPI cascaded to the employee's own
        department. Assignments are keyed by (employee, kpi); re-assigning
        replaces the earlier one and puts it back to Draft.
        """
        employee = await self.session.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")

        total_weight = sum(a.weight for a in data.assignments)
        if total_weight > settings.MAX_TOTAL_WEIGHT:
            raise ValidationError(f"Total weight cannot exceed {settings.MAX_TOTAL_WEIGHT}% (got {total_weight}%)")

        department_kpis = {c.corporate_kpi_id: c for c in await self.get_cascaded_kpis(employee.department)}
        catalog = {k.id: k for k in await self.get_catalog()}

        rows: List[Dict[str, Any]] = []
        for item in data.assignments:
            if item.type == IndividualKpiType.CASCADED.value:
                if item.kpi_id not in department_kpis:
                    raise ValidationError(f"KPI {item.kpi_id} has not been cascaded to {employee.department}")
                corporate = catalog.get(item.kpi_id)
                rows.append({
                    "kpi_id": item.kpi_id,
                    "kpi_measure": (corporate.measure if corporate and corporate.measure else item.kpi_id),
                    "type": IndividualKpiType.CASCADED,
                    "weight": item.weight,
                    "target": item.target,
                    "task": None,
                    "targets": None,
                })
            else:
                rows.append({
                    "kpi_id": committed_kpi_id(),
                    "kpi_measure": item.kpi_measure,
                    "type": IndividualKpiType.COMMITTED,
                    "weight": item.weight,
                    "target": None,
                    "task": item.task,
                    "targets": item.targets.model_dump(),
                })

        try:
            existing = {k.kpi_id: k for k in await self.get_individual_kpis(employee_id)}
            saved = []
            for row in rows:
                assignment = existing.get(row["kpi_id"])
                if assignment is None:
                    assignment = IndividualKpi(id=uuid.uuid4().hex, employee_id=employee_id)
                    self.session.add(assignment)
                for field, value in row.items():
                    setattr(assignment, field, value)
                assignment.status = IndividualKpiStatus.DRAFT
                assignment.notes = None
                assignment.rejection_reason = None
                saved.append(assignment)

            await self.session.commit()
            for assignment in saved:
                await self.session.refresh(assignment)
        except Exception as e:
            await self.session.rollback()
            write_error_channel.report("individual_kpis", "upsert", e, document_id=employee_id, actor_id=actor_id)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error assigning KPIs")

        log_user_action(actor_id, "assign", "individual_kpis", employee_id)
        logger.info(f"{len(saved)} KPI(s) assigned to {employee_id} (total weight {total_weight}%)")
        return saved

    # ---------- Three-level view ----------
    async def build_cascade_view(self) -> Dict[str, Any]:
        catalog = await self.get_catalog()
        employees = await self.get_employees()
        cascaded = await self.get_cascaded_kpis()
        individual = await self.get_individual_kpis()
        catalog_by_id = {k.id: k for k in catalog}

        corporate = [
            {"perspective": perspective, "kpis": [KpiResponse.model_validate(k) for k in kpis]}
            for perspective, kpis in group_by_perspective(catalog).items()
        ]

        department_level = []
        for department in list_departments(employees):
            kpis = [self._cascaded_response(c, catalog_by_id) for c in cascaded if c.department == department]
            department_level.append({
                "department": department,
                "kpis": kpis,
                "total_weight": sum(k.weight for k in kpis),
            })

        by_employee: Dict[str, List[IndividualKpi]] = {}
        for assignment in individual:
            by_employee.setdefault(assignment.employee_id, []).append(assignment)

        individual_level = []
        for manager in list_managers(employees):
            members = []
            for employee in employees:
                if (employee.manager or "").strip() != manager:
                    continue
                kpis = [IndividualKpiResponse.model_validate(k) for k in by_employee.get(employee.id, [])]
                members.append({
                    "employee_id": employee.id,
                    "name": employee.name,
                    "department": employee.department,
                    "position": employee.position,
                    "kpis": kpis,
                    "total_weight": sum(k.weight for k in kpis),
                })
            individual_level.append({"manager": manager, "members": members})

        return {"corporate": corporate, "department": department_level, "individual": individual_level}
