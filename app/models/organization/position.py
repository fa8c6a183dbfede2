from sqlalchemy import Column, JSON, String
from app.db.base import BaseModel

class Position(BaseModel):
    __tablename__ = 'positions'
    
    name = Column(String(150))
    department = Column(String(100))
    extra_fields = Column(JSON, default=dict)
