from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

class KpiBase(BaseModel):
    perspective: Optional[str] = None
    strategic_objective: Optional[str] = None
    measure: Optional[str] = None
    target: Optional[str] = None
    unit: Optional[str] = None
    category: Optional[str] = None
    achievement: Optional[float] = None

class KpiUpdate(KpiBase):
    pass

class KpiResponse(KpiBase):
    id: str
    extra_fields: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PerspectiveGroup(BaseModel):
    perspective: str
    kpis: List[KpiResponse]

class MonthlyKpiResponse(BaseModel):
    id: str
    parent_kpi_id: str
    month: int = Field(ge=1, le=12)
    target: Optional[float] = 0
    actual: Optional[float] = 0

    class Config:
        from_attributes = True
