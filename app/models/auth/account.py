from sqlalchemy import Boolean, Column, DateTime, String
from app.db.base import BaseModel

class LoginAccount(BaseModel):
    """Login identity; its id is the uid that employee and permission records join on"""
    __tablename__ = "accounts"

    email = Column(String(255), unique=True, index=True, nullable=True)
    hashed_password = Column(String(255), nullable=True)
    display_name = Column(String(255), nullable=True)
    is_anonymous = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<LoginAccount {self.email or self.id}>"
