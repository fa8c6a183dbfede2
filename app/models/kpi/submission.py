from sqlalchemy import Column, DateTime, Enum as SQLEnum, String, Text
from sqlalchemy.sql import func
from app.db.base import BaseModel
from app.models.shared.enums import SubmissionStatus

class KpiSubmission(BaseModel):
    """Actual value claimed by an employee against one of their individual KPIs"""
    __tablename__ = 'kpi_submissions'
    
    kpi_id = Column(String(64), nullable=False, index=True)
    kpi_measure = Column(String(255), nullable=False)
    submitted_by = Column(String(64), nullable=False, index=True)
    submitter_name = Column(String(255))
    department = Column(String(100))
    actual_value = Column(String(255), nullable=False)
    target_value = Column(String(255))
    notes = Column(Text)
    submission_date = Column(DateTime(timezone=True), server_default=func.now())
    status = Column(SQLEnum(SubmissionStatus), nullable=False, default=SubmissionStatus.MANAGER_REVIEW, index=True)
    rejection_reason = Column(Text)
