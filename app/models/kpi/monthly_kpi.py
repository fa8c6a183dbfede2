from sqlalchemy import Column, Float, Integer, JSON, String
from app.db.base import BaseModel

class MonthlyKpi(BaseModel):
    """Monthly target and actual figures for a corporate KPI"""
    __tablename__ = 'monthly_kpis'
    
    parent_kpi_id = Column(String(64), nullable=False, index=True)
    month = Column(Integer, nullable=False)  # 1-12
    target = Column(Float, default=0)
    actual = Column(Float, default=0)
    extra_fields = Column(JSON, default=dict)
