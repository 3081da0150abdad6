"""SQLAlchemy ORM models."""

from warden.models.base import Base
from warden.models.role import Permission, Role, RolePermission, UserRole
from warden.models.session import UserSession
from warden.models.user import User

__all__ = [
    "Base",
    "Permission",
    "Role",
    "RolePermission",
    "User",
    "UserRole",
    "UserSession",
]
