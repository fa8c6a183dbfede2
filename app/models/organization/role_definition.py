from sqlalchemy import Column, JSON, String, Text
from app.db.base import BaseModel

class RoleDefinition(BaseModel):
    """Organizational role from master data (not the access role of AppUser)"""
    __tablename__ = 'roles'
    
    name = Column(String(100))
    description = Column(Text)
    extra_fields = Column(JSON, default=dict)
