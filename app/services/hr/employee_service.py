import logging
import time
from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_

from app.core.exceptions import NotFoundError
from app.core.logging import log_user_action
from app.core.write_errors import write_error_channel
from app.models.auth.account import LoginAccount
from app.models.hr.employee import Employee
from app.schemas.hr.employee_schema import EmployeeCreate
from app.services.auth.permission_service import PermissionService

logger = logging.getLogger(__name__)


class EmployeeService:
    def __init__(self, session: AsyncSession):
        self.session = session

    # ---------- Helpers ----------
    @staticmethod
    def _generate_employee_id() -> str:
        return f"user-{int(time.time() * 1000)}"

    async def _with_login_flags(self, employees: List[Employee]) -> List[Dict[str, Any]]:
        ids = [e.id for e in employees]
        login_ids = set()
        if ids:
            result = await self.session.execute(select(LoginAccount.id).where(LoginAccount.id.in_(ids)))
            login_ids = set(result.scalars().all())
        return [
            {
                "id": e.id,
                "name": e.name,
                "department": e.department,
                "position": e.position,
                "manager": e.manager,
                "extra_fields": e.extra_fields,
                "has_login": e.id in login_ids,
                "created_at": e.created_at,
                "updated_at": e.updated_at,
            }
            for e in employees
        ]

    # ---------- Getters ----------
    async def get_employee(self, employee_id: str) -> Optional[Employee]:
        result = await self.session.execute(select(Employee).where(Employee.id == employee_id))
        return result.scalar_one_or_none()

    async def get_employees(
        self,
        page_index: int = 1,
        page_size: int = 100,
        search: Optional[str] = None,
        department: Optional[str] = None
    ) -> Dict[str, Any]:
        """Get employees with pagination"""
        query = select(Employee)
        if department:
            query = query.where(Employee.department == department)
        if search:
            like = f"%{search}%"
            query = query.where(
                or_(
                    Employee.name.ilike(like),
                    Employee.position.ilike(like),
                    Employee.id.ilike(like)
                )
            )

        total = (await self.session.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0
        skip = (page_index - 1) * page_size
        result = await self.session.execute(query.order_by(Employee.created_at, Employee.id).offset(skip).limit(page_size))

        return {
            "page_index": page_index,
            "page_size": page_size,
            "count": total,
            "data": await self._with_login_flags(list(result.scalars().all()))
        }

    # ---------- Create / Delete ----------
    async def create_employee(self, data: EmployeeCreate, actor_id: Optional[str] = None) -> Dict[str, Any]:
        employee_id = data.id or self._generate_employee_id()
        if await self.get_employee(employee_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Employee {employee_id} already exists"
            )
        employee = Employee(
            id=employee_id,
            name=data.name,
            department=data.department or "N/A",
            position=data.position or "N/A",
            manager=data.manager or "",
        )
        try:
            self.session.add(employee)
            await self.session.commit()
            await self.session.refresh(employee)
        except Exception as e:
            await self.session.rollback()
            write_error_channel.report("employees", "create", e, document_id=employee_id, actor_id=actor_id)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating employee")

        log_user_action(actor_id, "create", "employees", employee_id)
        logger.info(f"Employee created: {employee.name} ({employee_id})")
        return (await self._with_login_flags([employee]))[0]

    async def delete_employee(self, employee_id: str, actor_id: Optional[str] = None) -> bool:
        """Remove the org record and the permission record; KPI assignments stay"""
        employee = await self.get_employee(employee_id)
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found")
        try:
            await self.session.delete(employee)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            write_error_channel.report("employees", "delete", e, document_id=employee_id, actor_id=actor_id)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting employee")

        await PermissionService(self.session).delete_permissions(employee_id, actor_id)
        log_user_action(actor_id, "delete", "employees", employee_id)
        logger.info(f"Employee deleted: {employee_id}")
        return True
