# app/auth/permissions.py

from typing import Dict, List, Optional
from fastapi import HTTPException, status
import logging

from app.models.shared.enums import Role

logger = logging.getLogger(__name__)


class MenuAccessChecker:
    """
    Check a user's role and per-route menu access
    """

    def __init__(self, role: Role, menu_access: Optional[Dict[str, bool]] = None):
        self.role = Role(role)
        self.menu_access = dict(menu_access or {})
        logger.debug(f"MenuAccessChecker initialized for role {self.role.value} with {len(self.menu_access)} routes")

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def can_open(self, route: str) -> bool:
        """
        Check if the user may open a menu route

        Examples:
            can_open("/cascade")
        """
        allowed = bool(self.menu_access.get(route, False))
        if not allowed:
            logger.debug(f"Menu access denied: {route} for role {self.role.value}")
        return allowed

    def require_route(self, route: str, custom_message: Optional[str] = None):
        """
        Require access to a route or raise HTTPException
        """
        if not self.can_open(route):
            message = custom_message or f"No access to {route}"
            logger.warning(f"Menu access check failed: {message}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=message
            )

    def require_admin(self):
        if not self.is_admin:
            logger.warning(f"Admin check failed for role {self.role.value}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Administrator role required"
            )

    def has_any_route(self, *routes: str) -> bool:
        """
        Check if the user can open any of the given routes (OR logic)
        """
        return any(self.can_open(route) for route in routes)

    def allowed_routes(self) -> List[str]:
        return [route for route, allowed in self.menu_access.items() if allowed]
