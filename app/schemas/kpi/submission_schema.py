from pydantic import BaseModel, validator
from typing import Dict, List, Optional
from datetime import datetime

from app.models.shared.enums import SubmissionStatus
from app.schemas.kpi.cascade_schema import IndividualKpiResponse

class SubmissionCreate(BaseModel):
    kpi_id: str  # individual KPI id
    actual_value: str
    notes: Optional[str] = ""

    @validator('actual_value')
    def validate_actual_value(cls, v):
        if not v or not v.strip():
            raise ValueError('Actual value is required')
        return v.strip()

class SubmissionResponse(BaseModel):
    id: str
    kpi_id: str
    kpi_measure: str
    submitted_by: str
    submitter_name: Optional[str] = None
    department: Optional[str] = None
    actual_value: str
    target_value: Optional[str] = None
    notes: Optional[str] = None
    submission_date: Optional[datetime] = None
    status: SubmissionStatus
    rejection_reason: Optional[str] = None

    class Config:
        from_attributes = True

class SubmittableKpi(BaseModel):
    kpi: IndividualKpiResponse
    submitted: bool

class SubmittableStats(BaseModel):
    in_progress: int
    needs_submission: int
    submitted: int

class SubmittableResponse(BaseModel):
    kpis: List[SubmittableKpi]
    stats: SubmittableStats
    submissions: List[SubmissionResponse]

class SubmissionRejectRequest(BaseModel):
    reason: Optional[str] = None

class SubmissionStats(BaseModel):
    total: int
    by_status: Dict[str, int]

class BulkActionResult(BaseModel):
    updated: List[str]
    count: int
