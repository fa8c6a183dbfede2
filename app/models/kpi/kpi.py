from sqlalchemy import Column, Float, JSON, String, Text
from app.db.base import BaseModel

class Kpi(BaseModel):
    """Corporate KPI from the imported catalog"""
    __tablename__ = 'kpi_catalog'
    
    perspective = Column(String(100), index=True)
    strategic_objective = Column(Text)
    measure = Column(String(255))
    target = Column(String(255))  # free text, often locale specific ("≥ 194.10 ล้านบาท")
    unit = Column(String(50))
    category = Column(String(100))
    achievement = Column(Float)  # percentage
    extra_fields = Column(JSON, default=dict)
