from sqlalchemy import Column, String
from app.db.base import BaseModel

GLOBAL_SETTINGS_ID = "global"

class AppSetting(BaseModel):
    __tablename__ = 'settings'
    
    org_name = Column(String(255))
    period = Column(String(100))
    currency = Column(String(10))
    period_date = Column(String(50))
