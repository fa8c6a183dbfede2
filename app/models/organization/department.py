from sqlalchemy import Column, JSON, String, Text
from app.db.base import BaseModel

class Department(BaseModel):
    __tablename__ = 'departments'
    
    name = Column(String(100))
    description = Column(Text)
    extra_fields = Column(JSON, default=dict)
