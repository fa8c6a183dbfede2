from sqlalchemy import Column, Integer, String, UniqueConstraint
from app.db.base import BaseModel

class CascadedKpi(BaseModel):
    """Corporate KPI deployed to a department with its own target and weight"""
    __tablename__ = 'cascaded_kpis'
    __table_args__ = (
        UniqueConstraint('corporate_kpi_id', 'department', name='uq_cascaded_kpi_department'),
    )
    
    corporate_kpi_id = Column(String(64), nullable=False, index=True)
    department = Column(String(100), nullable=False, index=True)
    department_target = Column(String(255), nullable=False)
    weight = Column(Integer, nullable=False, default=0)
