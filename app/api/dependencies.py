from typing import Optional
from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_async_session
from app.auth.jwt_handler import decode_access_token
from app.auth.permissions import MenuAccessChecker
from app.models.auth.account import LoginAccount
from app.services.auth.auth_service import AuthService
from app.services.auth.permission_service import PermissionService
import logging

security = HTTPBearer()
logger = logging.getLogger(__name__)

def _unauthorized(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

async def get_current_account(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
    session: AsyncSession = Depends(get_async_session)
) -> LoginAccount:
    """Get current authenticated login account"""
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise _unauthorized()

    account_id: Optional[str] = payload.get("sub")
    if not account_id:
        raise _unauthorized()

    account = await AuthService(session).get_account(account_id)
    if account is None or not account.is_active:
        raise _unauthorized("Account not found or inactive")

    # Role and menu access are re-read from storage; token claims may be stale
    permissions = await PermissionService(session).get_effective_permissions(account.id)
    request.state.current_account = account
    request.state.access_checker = MenuAccessChecker(permissions["role"], permissions["menu_access"])
    return account

async def get_access_checker(
    request: Request,
    current_account: LoginAccount = Depends(get_current_account)
) -> MenuAccessChecker:
    """
    Access checker for current account from request state

    Set in request.state by get_current_account
    """
    return request.state.access_checker

async def require_admin(
    checker: MenuAccessChecker = Depends(get_access_checker),
    current_account: LoginAccount = Depends(get_current_account)
) -> LoginAccount:
    """Require the Admin role; returns the admin's account"""
    checker.require_admin()
    return current_account

def require_menu_access(*routes: str):
    """
    Dependency requiring access to any one of the given menu routes

    Examples:
        require_menu_access("/cascade")
        require_menu_access("/approvals", "/portfolio")
    """
    async def menu_dependency(
        checker: MenuAccessChecker = Depends(get_access_checker),
        current_account: LoginAccount = Depends(get_current_account)
    ) -> LoginAccount:
        if checker.has_any_route(*routes):
            return current_account
        logger.warning(f"Account {current_account.id} denied access to {', '.join(routes)}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"No access to {' or '.join(routes)}"
        )

    return menu_dependency
