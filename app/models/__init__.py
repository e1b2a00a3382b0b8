"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.role import Permission, Role, RolePermission
from app.models.user import Purchase, User, UserDevice

__all__ = [
    "Base",
    "Permission",
    "Purchase",
    "Role",
    "RolePermission",
    "User",
    "UserDevice",
]
