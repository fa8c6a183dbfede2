from sqlalchemy import Column, JSON, String
from app.db.base import BaseModel

class Employee(BaseModel):
    __tablename__ = 'employees'
    
    name = Column(String(255), nullable=False, default="N/A")
    department = Column(String(100), index=True, default="N/A")
    position = Column(String(150), default="N/A")
    manager = Column(String(255), default="")  # manager display name, as in the imported org chart
    extra_fields = Column(JSON, default=dict)
