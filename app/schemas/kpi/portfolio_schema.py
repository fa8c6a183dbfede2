from pydantic import BaseModel, validator
from typing import Optional

class CommitmentConfirm(BaseModel):
    notes: Optional[str] = None

class CommitmentReject(BaseModel):
    reason: str

    @validator('reason')
    def validate_reason(cls, v):
        if not v or not v.strip():
            raise ValueError('A reason is required to reject a KPI')
        return v.strip()
