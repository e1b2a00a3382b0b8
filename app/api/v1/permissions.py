"""Permission endpoints: CRUD."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.roles import NamedCreate, NamedUpdate, PermissionOut
from app.services.permissions import (
    create_permission,
    delete_permission,
    get_permission,
    list_permissions,
    update_permission,
)

router = APIRouter()

PermissionId = Annotated[int, Path(ge=1, description="Permission id")]


@router.get("", response_model=list[PermissionOut])
def get_permissions(db: Annotated[Session, Depends(get_db)]) -> list[PermissionOut]:
    return [PermissionOut.model_validate(p) for p in list_permissions(db)]


@router.post("", response_model=PermissionOut, status_code=status.HTTP_201_CREATED)
def post_permission(
    body: NamedCreate,
    db: Annotated[Session, Depends(get_db)],
) -> PermissionOut:
    """Create a permission. 409 when the name is taken."""
    return PermissionOut.model_validate(create_permission(db, body.name, body.description))


@router.get("/{permission_id}", response_model=PermissionOut)
def get_permission_by_id(
    permission_id: PermissionId,
    db: Annotated[Session, Depends(get_db)],
) -> PermissionOut:
    return PermissionOut.model_validate(get_permission(db, permission_id))


@router.put("/{permission_id}", response_model=PermissionOut)
def put_permission(
    permission_id: PermissionId,
    body: NamedUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> PermissionOut:
    return PermissionOut.model_validate(
        update_permission(db, permission_id, body.model_dump(exclude_unset=True))
    )


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_permission(
    permission_id: PermissionId,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    delete_permission(db, permission_id)
