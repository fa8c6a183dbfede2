from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class SettingsResponse(BaseModel):
    org_name: str
    period: str
    currency: str
    period_date: Optional[str] = None
    updated_at: Optional[datetime] = None

class SettingsUpdate(BaseModel):
    org_name: Optional[str] = None
    period: Optional[str] = None
    currency: Optional[str] = None
    period_date: Optional[str] = None
