from typing import Dict, List, Optional
from pydantic import BaseModel, validator

from app.models.shared.enums import MenuRoute, Role

class PermissionEntry(BaseModel):
    role: Role
    menu_access: Dict[str, bool]

    @validator('menu_access')
    def known_routes_only(cls, v):
        known = {route.value for route in MenuRoute}
        unknown = sorted(set(v) - known)
        if unknown:
            raise ValueError(f"Unknown menu routes: {', '.join(unknown)}")
        return v

class UserPermissionResponse(PermissionEntry):
    user_id: str
    has_login: bool = False
    is_default: bool = False

class RoleChangeRequest(BaseModel):
    role: Role

class MenuAccessToggle(BaseModel):
    route: MenuRoute
    allowed: bool

class SavePermissionsRequest(BaseModel):
    permissions: Dict[str, PermissionEntry]

class SavePermissionsResponse(BaseModel):
    saved: List[str]
    skipped: List[str]

class PermissionMatrixRow(BaseModel):
    user_id: str
    name: str
    department: Optional[str] = None
    position: Optional[str] = None
    role: Role
    suggested_role: Role
    menu_access: Dict[str, bool]
    has_login: bool
    is_default: bool

class PermissionMatrixResponse(BaseModel):
    routes: List[str]
    roles: List[Role]
    rows: List[PermissionMatrixRow]
