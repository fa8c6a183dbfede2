from pydantic import BaseModel, Field, validator
from typing import Annotated, Dict, List, Literal, Optional, Union
from datetime import datetime

from app.models.shared.enums import IndividualKpiStatus, IndividualKpiType
from app.schemas.kpi.kpi_schema import PerspectiveGroup

class CascadeRequest(BaseModel):
    departments: List[str]
    department_target: str
    weight: int = Field(ge=0, le=100)

    @validator('departments')
    def validate_departments(cls, v):
        cleaned = [d.strip() for d in v if d and d.strip()]
        if not cleaned:
            raise ValueError('Select at least one department')
        return list(dict.fromkeys(cleaned))

    @validator('department_target')
    def validate_target(cls, v):
        if not v or not v.strip():
            raise ValueError('Department target is required')
        return v.strip()

class CascadedKpiResponse(BaseModel):
    id: str
    corporate_kpi_id: str
    department: str
    department_target: str
    weight: int
    measure: Optional[str] = None
    perspective: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CommittedTargets(BaseModel):
    level1: str = ""
    level2: str = ""
    level3: str = ""
    level4: str = ""
    level5: str = ""

class CascadedAssignment(BaseModel):
    type: Literal["cascaded"] = "cascaded"
    kpi_id: str  # corporate KPI id cascaded to the employee's department
    target: str
    weight: int = Field(ge=0, le=100)

    @validator('target')
    def validate_target(cls, v):
        if not v or not v.strip():
            raise ValueError('Target is required')
        return v.strip()

class CommittedAssignment(BaseModel):
    type: Literal["committed"] = "committed"
    task: str
    kpi_measure: str
    weight: int = Field(ge=0, le=100)
    targets: CommittedTargets = CommittedTargets()

    @validator('task', 'kpi_measure')
    def validate_text(cls, v):
        if not v or not v.strip():
            raise ValueError('Task and measure are required')
        return v.strip()

Assignment = Annotated[Union[CascadedAssignment, CommittedAssignment], Field(discriminator="type")]

class AssignKpisRequest(BaseModel):
    assignments: List[Assignment]

    @validator('assignments')
    def validate_assignments(cls, v):
        if not v:
            raise ValueError('At least one KPI assignment is required')
        committed = [a for a in v if a.type == "committed"]
        if len(committed) > 1:
            raise ValueError('Only one committed KPI can be added per request')
        return v

class IndividualKpiResponse(BaseModel):
    id: str
    employee_id: str
    kpi_id: str
    kpi_measure: str
    weight: int
    type: IndividualKpiType
    status: IndividualKpiStatus
    target: Optional[str] = None
    task: Optional[str] = None
    targets: Optional[Dict[str, str]] = None
    notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    display_measure: str
    display_target: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class DepartmentLevel(BaseModel):
    department: str
    kpis: List[CascadedKpiResponse]
    total_weight: int

class TeamMember(BaseModel):
    employee_id: str
    name: str
    department: Optional[str] = None
    position: Optional[str] = None
    kpis: List[IndividualKpiResponse]
    total_weight: int

class ManagerTeam(BaseModel):
    manager: str
    members: List[TeamMember]

class CascadeViewResponse(BaseModel):
    corporate: List[PerspectiveGroup]
    department: List[DepartmentLevel]
    individual: List[ManagerTeam]
