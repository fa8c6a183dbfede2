from pydantic import BaseModel, ConfigDict, validator
from typing import Any, Dict, Optional
from datetime import datetime

class EmployeeBase(BaseModel):
    name: str
    department: Optional[str] = None
    position: Optional[str] = None
    manager: Optional[str] = ""

    model_config = ConfigDict(from_attributes=True)

class EmployeeCreate(EmployeeBase):
    id: Optional[str] = None  # generated when omitted

    @validator('name')
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError('Employee name is required')
        return v.strip()

    @validator('id')
    def validate_id(cls, v):
        if v is None:
            return v
        return v.strip() or None

class EmployeeResponse(EmployeeBase):
    id: str
    extra_fields: Optional[Dict[str, Any]] = None
    has_login: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
