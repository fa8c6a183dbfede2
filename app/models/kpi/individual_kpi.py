from sqlalchemy import Column, Enum as SQLEnum, Integer, JSON, String, Text, UniqueConstraint
from app.db.base import BaseModel
from app.models.shared.enums import IndividualKpiStatus, IndividualKpiType

class IndividualKpi(BaseModel):
    __tablename__ = 'individual_kpis'
    __table_args__ = (
        UniqueConstraint('employee_id', 'kpi_id', name='uq_individual_kpi_employee'),
    )
    
    employee_id = Column(String(64), nullable=False, index=True)
    kpi_id = Column(String(64), nullable=False)  # cascaded KPI id, or committed-<millis>
    kpi_measure = Column(String(255), nullable=False)
    weight = Column(Integer, nullable=False, default=0)
    type = Column(SQLEnum(IndividualKpiType), nullable=False)
    status = Column(SQLEnum(IndividualKpiStatus), nullable=False, default=IndividualKpiStatus.DRAFT, index=True)
    
    # cascaded assignments
    target = Column(String(255))
    
    # committed assignments
    task = Column(Text)
    targets = Column(JSON)  # {"level1": ..., "level5": ...}
    
    notes = Column(Text)
    rejection_reason = Column(Text)

    @property
    def display_measure(self) -> str:
        if self.type == IndividualKpiType.COMMITTED:
            return self.task or self.kpi_measure
        return self.kpi_measure

    @property
    def display_target(self) -> str:
        if self.type == IndividualKpiType.CASCADED:
            return self.target or ""
        return "5-level scale"
