from sqlalchemy import Column, Enum as SQLEnum, JSON
from app.db.base import BaseModel
from app.models.shared.enums import Role

class AppUser(BaseModel):
    """Permission record: role plus per-route menu access, keyed by the login account id"""
    __tablename__ = "users"

    role = Column(SQLEnum(Role), nullable=False, default=Role.EMPLOYEE)
    menu_access = Column(JSON, nullable=False, default=dict)

    def __repr__(self):
        return f"<AppUser {self.id} role={self.role}>"
