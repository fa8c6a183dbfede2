from datetime import datetime
from typing import Dict, Optional
from pydantic import BaseModel, EmailStr, validator

from app.models.shared.enums import Role

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    display_name: Optional[str] = None
    employee_id: Optional[str] = None  # links the login to an existing employee record

    @validator('password')
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError('Password must be at least 8 characters')
        return v

class AccountResponse(BaseModel):
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    is_anonymous: bool
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class LoginResponse(BaseModel):
    account: AccountResponse
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    role: Role
    menu_access: Dict[str, bool]

class MeResponse(BaseModel):
    account: AccountResponse
    role: Role
    menu_access: Dict[str, bool]
    is_default: bool
