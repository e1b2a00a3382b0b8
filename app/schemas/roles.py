"""Request/response schemas for role and permission endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, PositiveInt


class NamedCreate(BaseModel):
    """Body for creating a role or permission."""

    model_config = {"extra": "forbid"}

    name: str = Field(..., min_length=2, max_length=50)
    description: str | None = Field(default=None, max_length=200)


class NamedUpdate(BaseModel):
    """Only the description of a role or permission is editable."""

    model_config = {"extra": "forbid"}

    description: str = Field(..., max_length=200)


class RoleOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime


class PermissionOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime


class AttachPermissionsRequest(BaseModel):
    """Body for POST /roles/{id}/permissions: the complete new permission set."""

    model_config = {"populate_by_name": True}

    permission_ids: list[PositiveInt] = Field(
        ...,
        alias="permissionIds",
        min_length=1,
        description="At least one permission ID is required",
    )


class RolePermissionsResponse(BaseModel):
    model_config = {"populate_by_name": True}

    role_id: int = Field(alias="roleId")
    permission_ids: list[int] = Field(alias="permissionIds")
