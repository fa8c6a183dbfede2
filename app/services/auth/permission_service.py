import logging
from typing import Any, Dict, Iterable, List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.core.write_errors import write_error_channel
from app.models.auth.account import LoginAccount
from app.models.auth.user import AppUser
from app.models.hr.employee import Employee
from app.models.shared.enums import MenuRoute, Role
from app.schemas.auth.permission import PermissionEntry

logger = logging.getLogger(__name__)

MENU_ROUTES: List[str] = [route.value for route in MenuRoute]

_GRANTS = {
    Role.ADMIN: set(MENU_ROUTES),
    Role.VP: {"/dashboard", "/cascade", "/portfolio", "/approvals", "/reports", "/user-management"},
    Role.AVP: {"/dashboard", "/cascade", "/portfolio", "/approvals", "/reports"},
    Role.MANAGER: {"/dashboard", "/cascade", "/portfolio", "/approvals", "/reports"},
    Role.EMPLOYEE: {"/dashboard", "/portfolio", "/submit"},
}

DEFAULT_MENU_ACCESS: Dict[Role, Dict[str, bool]] = {
    role: {route: route in granted for route in MENU_ROUTES}
    for role, granted in _GRANTS.items()
}


def default_menu_access(role: Role) -> Dict[str, bool]:
    """Fresh copy of a role's default route mapping"""
    return dict(DEFAULT_MENU_ACCESS[Role(role)])


def default_entry(role: Role = Role.EMPLOYEE) -> PermissionEntry:
    return PermissionEntry(role=role, menu_access=default_menu_access(role))


def change_role(entry: PermissionEntry, role: Role) -> PermissionEntry:
    """New role replaces the whole mapping; earlier per-route overrides are dropped"""
    return PermissionEntry(role=role, menu_access=default_menu_access(role))


def set_menu_access(entry: PermissionEntry, route: str, allowed: bool) -> PermissionEntry:
    menu_access = dict(entry.menu_access)
    menu_access[route] = allowed
    return PermissionEntry(role=entry.role, menu_access=menu_access)


def suggest_role(position: Optional[str]) -> Role:
    """Best guess from a job title; used as a hint only"""
    title = (position or "").lower()
    if "avp" in title:
        return Role.AVP
    if "vp" in title or "vice president" in title:
        return Role.VP
    if "manager" in title or "ผู้จัดการ" in title:
        return Role.MANAGER
    return Role.EMPLOYEE


class PermissionService:
    def __init__(self, session: AsyncSession):
        self.session = session

    # ---------- Getters ----------
    async def get_app_user(self, user_id: str) -> Optional[AppUser]:
        result = await self.session.execute(select(AppUser).where(AppUser.id == user_id))
        return result.scalar_one_or_none()

    async def has_login(self, user_id: str) -> bool:
        result = await self.session.execute(select(LoginAccount.id).where(LoginAccount.id == user_id))
        return result.scalar_one_or_none() is not None

    async def _login_ids(self, user_ids: Iterable[str]) -> set:
        ids = list(user_ids)
        if not ids:
            return set()
        result = await self.session.execute(select(LoginAccount.id).where(LoginAccount.id.in_(ids)))
        return set(result.scalars().all())

    async def get_effective_permissions(self, user_id: str) -> Dict[str, Any]:
        """Stored permission record, or the Employee defaults when there is none"""
        app_user = await self.get_app_user(user_id)
        if app_user is None:
            entry = default_entry(Role.EMPLOYEE)
            return {"user_id": user_id, "role": entry.role, "menu_access": entry.menu_access, "is_default": True}
        return {
            "user_id": user_id,
            "role": app_user.role,
            "menu_access": {**default_menu_access(app_user.role), **(app_user.menu_access or {})},
            "is_default": False,
        }

    async def build_matrix(self) -> Dict[str, Any]:
        employees = (await self.session.execute(select(Employee).order_by(Employee.created_at, Employee.id))).scalars().all()
        users = {u.id: u for u in (await self.session.execute(select(AppUser))).scalars().all()}
        login_ids = await self._login_ids(e.id for e in employees)

        rows = []
        for employee in employees:
            app_user = users.get(employee.id)
            if app_user is None:
                role, menu_access = Role.EMPLOYEE, default_menu_access(Role.EMPLOYEE)
            else:
                role = app_user.role
                menu_access = {**default_menu_access(app_user.role), **(app_user.menu_access or {})}
            rows.append({
                "user_id": employee.id,
                "name": employee.name,
                "department": employee.department,
                "position": employee.position,
                "role": role,
                "suggested_role": suggest_role(employee.position),
                "menu_access": menu_access,
                "has_login": employee.id in login_ids,
                "is_default": app_user is None,
            })
        return {"routes": MENU_ROUTES, "roles": list(Role), "rows": rows}

    # ---------- Updates ----------
    async def _write_entry(self, user_id: str, entry: PermissionEntry, actor_id: Optional[str]) -> AppUser:
        try:
            app_user = await self.get_app_user(user_id)
            if app_user is None:
                app_user = AppUser(id=user_id, role=entry.role, menu_access=dict(entry.menu_access))
                self.session.add(app_user)
            else:
                app_user.role = entry.role
                app_user.menu_access = dict(entry.menu_access)
            await self.session.commit()
            await self.session.refresh(app_user)
            return app_user
        except Exception as e:
            await self.session.rollback()
            write_error_channel.report("users", "set", e, document_id=user_id, actor_id=actor_id)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error saving user permissions"
            )

    async def _require_login(self, user_id: str):
        if not await self.has_login(user_id):
            raise NotFoundError(f"User {user_id} has no login account")

    async def update_role(self, user_id: str, role: Role, actor_id: Optional[str] = None) -> Dict[str, Any]:
        await self._require_login(user_id)
        current = await self.get_effective_permissions(user_id)
        entry = change_role(PermissionEntry(role=current["role"], menu_access=current["menu_access"]), role)
        await self._write_entry(user_id, entry, actor_id)
        logger.info(f"Role of {user_id} changed to {role.value} by {actor_id}; menu access reset")
        return await self.get_effective_permissions(user_id)

    async def toggle_menu_access(self, user_id: str, route: str, allowed: bool, actor_id: Optional[str] = None) -> Dict[str, Any]:
        await self._require_login(user_id)
        current = await self.get_effective_permissions(user_id)
        entry = set_menu_access(PermissionEntry(role=current["role"], menu_access=current["menu_access"]), route, allowed)
        await self._write_entry(user_id, entry, actor_id)
        logger.info(f"Menu access {route}={allowed} set for {user_id} by {actor_id}")
        return await self.get_effective_permissions(user_id)

    async def save_permissions(self, permissions: Dict[str, PermissionEntry], actor_id: Optional[str] = None) -> Dict[str, List[str]]:
        """Best-effort save: ids without a login account are skipped"""
        login_ids = await self._login_ids(permissions.keys())
        saved, skipped = [], []
        for user_id, entry in permissions.items():
            if user_id not in login_ids:
                logger.info(f"Skipping permissions for {user_id}: no login account")
                skipped.append(user_id)
                continue
            await self._write_entry(user_id, entry, actor_id)
            saved.append(user_id)
        return {"saved": saved, "skipped": skipped}

    async def delete_permissions(self, user_id: str, actor_id: Optional[str] = None) -> bool:
        app_user = await self.get_app_user(user_id)
        if app_user is None:
            return False
        try:
            await self.session.delete(app_user)
            await self.session.commit()
            return True
        except Exception as e:
            await self.session.rollback()
            write_error_channel.report("users", "delete", e, document_id=user_id, actor_id=actor_id)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error deleting user permissions"
            )
