from pydantic import BaseModel
from typing import Any, Dict, List, Optional

class MasterDataItem(BaseModel):
    id: str
    name: Optional[str] = None
    extra_fields: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True

class DepartmentResponse(MasterDataItem):
    description: Optional[str] = None

class PositionResponse(MasterDataItem):
    department: Optional[str] = None

class RoleDefinitionResponse(MasterDataItem):
    description: Optional[str] = None

class MasterDataResponse(BaseModel):
    departments: List[DepartmentResponse]
    positions: List[PositionResponse]
    roles: List[RoleDefinitionResponse]
