from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func
from app.models.base import Base

class BaseModel(Base):
    """Base model with common fields: string document id and server-side timestamps"""
    __abstract__ = True
    __mapper_args__ = {"eager_defaults": True}
    
    id = Column(String(64), primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
