"""Pydantic request/response schemas."""

from app.schemas.health import HealthResponse
from app.schemas.pagination import OrderBy, Pagination
from app.schemas.roles import (
    AttachPermissionsRequest,
    NamedCreate,
    NamedUpdate,
    PermissionOut,
    RoleOut,
    RolePermissionsResponse,
)
from app.schemas.users import (
    AdminCountsResponse,
    AdminCreate,
    DeviceOut,
    DevicesResponse,
    PurchaseOut,
    PurchasesListResponse,
    UserOut,
    UsersListResponse,
    UserUpdate,
)

__all__ = [
    "AdminCountsResponse",
    "AdminCreate",
    "AttachPermissionsRequest",
    "DeviceOut",
    "DevicesResponse",
    "HealthResponse",
    "NamedCreate",
    "NamedUpdate",
    "OrderBy",
    "Pagination",
    "PermissionOut",
    "PurchaseOut",
    "PurchasesListResponse",
    "RoleOut",
    "RolePermissionsResponse",
    "UserOut",
    "UsersListResponse",
    "UserUpdate",
]
