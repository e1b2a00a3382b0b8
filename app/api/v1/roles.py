"""Role endpoints: CRUD and replacement of a role's permission set."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.roles import (
    AttachPermissionsRequest,
    NamedCreate,
    NamedUpdate,
    PermissionOut,
    RoleOut,
    RolePermissionsResponse,
)
from app.services.roles import (
    create_role,
    delete_role,
    get_role,
    list_role_permissions,
    list_roles,
    replace_role_permissions,
    update_role,
)

router = APIRouter()

RoleId = Annotated[int, Path(ge=1, description="Role id")]


@router.get("", response_model=list[RoleOut])
def get_roles(db: Annotated[Session, Depends(get_db)]) -> list[RoleOut]:
    return [RoleOut.model_validate(r) for r in list_roles(db)]


@router.post("", response_model=RoleOut, status_code=status.HTTP_201_CREATED)
def post_role(
    body: NamedCreate,
    db: Annotated[Session, Depends(get_db)],
) -> RoleOut:
    """Create a role. 409 when the name is taken."""
    return RoleOut.model_validate(create_role(db, body.name, body.description))


@router.get("/{role_id}", response_model=RoleOut)
def get_role_by_id(
    role_id: RoleId,
    db: Annotated[Session, Depends(get_db)],
) -> RoleOut:
    return RoleOut.model_validate(get_role(db, role_id))


@router.put("/{role_id}", response_model=RoleOut)
def put_role(
    role_id: RoleId,
    body: NamedUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> RoleOut:
    return RoleOut.model_validate(update_role(db, role_id, body.model_dump(exclude_unset=True)))


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_role(
    role_id: RoleId,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    """Delete a role; its permission links are removed with it."""
    delete_role(db, role_id)


@router.get("/{role_id}/permissions", response_model=list[PermissionOut])
def get_role_permissions(
    role_id: RoleId,
    db: Annotated[Session, Depends(get_db)],
) -> list[PermissionOut]:
    return [PermissionOut.model_validate(p) for p in list_role_permissions(db, role_id)]


@router.post("/{role_id}/permissions", response_model=RolePermissionsResponse)
def post_role_permissions(
    role_id: RoleId,
    body: AttachPermissionsRequest,
    db: Annotated[Session, Depends(get_db)],
) -> RolePermissionsResponse:
    """
    Replace the role's permissions with exactly permissionIds.

    404 when the role or any permission is missing; the previous set is then kept.
    """
    attached = replace_role_permissions(db, role_id, body.permission_ids)
    return RolePermissionsResponse(role_id=role_id, permission_ids=attached)
