"""SQLAlchemy ORM models."""

from app.models.assignment import PermissionRole, PermissionUser, RoleUser
from app.models.base import Base
from app.models.permission import Permission, Role
from app.models.token import Token
from app.models.user import User

__all__ = [
    "Base",
    "Permission",
    "PermissionRole",
    "PermissionUser",
    "Role",
    "RoleUser",
    "Token",
    "User",
]
