# app/models/auth/__init__.py

from .account import LoginAccount
from .user import AppUser

__all__ = [
    "LoginAccount",
    "AppUser",
]
