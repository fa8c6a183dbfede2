import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_async_session
from app.api.dependencies import get_access_checker, get_current_account, require_admin, require_menu_access
from app.auth.permissions import MenuAccessChecker
from app.core.exceptions import PermissionDeniedError
from app.models.auth.account import LoginAccount
from app.schemas.auth.permission import (
    MenuAccessToggle,
    PermissionMatrixResponse,
    RoleChangeRequest,
    SavePermissionsRequest,
    SavePermissionsResponse,
    UserPermissionResponse,
)
from app.services.auth.permission_service import PermissionService

router = APIRouter()
logger = logging.getLogger(__name__)

async def _permission_response(service: PermissionService, user_id: str) -> UserPermissionResponse:
    permissions = await service.get_effective_permissions(user_id)
    return UserPermissionResponse(**permissions, has_login=await service.has_login(user_id))

@router.get("/permissions", response_model=PermissionMatrixResponse)
async def get_permission_matrix(
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(require_menu_access("/user-management"))
):
    """Permission matrix: one row per employee with role, menu access and suggested role"""
    service = PermissionService(session)
    return await service.build_matrix()

@router.put("/permissions", response_model=SavePermissionsResponse)
async def save_permissions(
    data: SavePermissionsRequest,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(require_admin)
):
    """Save several permission records; ids without a login account are skipped (admin only)"""
    service = PermissionService(session)
    return await service.save_permissions(data.permissions, actor_id=current_account.id)

@router.get("/{user_id}/permissions", response_model=UserPermissionResponse)
async def get_user_permissions(
    user_id: str,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(get_current_account),
    checker: MenuAccessChecker = Depends(get_access_checker)
):
    """Effective permissions of one user (self, or anyone with user management access)"""
    if user_id != current_account.id and not (checker.is_admin or checker.can_open("/user-management")):
        raise PermissionDeniedError()
    return await _permission_response(PermissionService(session), user_id)

@router.put("/{user_id}/role", response_model=UserPermissionResponse)
async def change_user_role(
    user_id: str,
    data: RoleChangeRequest,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(require_admin)
):
    """Change role; menu access is reset to the role defaults (admin only)"""
    service = PermissionService(session)
    await service.update_role(user_id, data.role, actor_id=current_account.id)
    return await _permission_response(service, user_id)

@router.put("/{user_id}/menu-access", response_model=UserPermissionResponse)
async def toggle_menu_access(
    user_id: str,
    data: MenuAccessToggle,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(require_admin)
):
    """Allow or deny one menu route (admin only)"""
    service = PermissionService(session)
    await service.toggle_menu_access(user_id, data.route.value, data.allowed, actor_id=current_account.id)
    return await _permission_response(service, user_id)

@router.delete("/{user_id}/permissions")
async def delete_user_permissions(
    user_id: str,
    session: AsyncSession = Depends(get_async_session),
    current_account: LoginAccount = Depends(require_admin)
):
    """Drop the stored record; the user falls back to the Employee defaults (admin only)"""
    service = PermissionService(session)
    deleted = await service.delete_permissions(user_id, actor_id=current_account.id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No permission record for this user")
    return {"message": "Permissions removed", "user_id": user_id}
