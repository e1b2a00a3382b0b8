"""Role access: CRUD and the full-replace attachment of permissions to a role."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import delete, insert, select
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.models import Permission, RolePermission
from app.models.descriptors import PERMISSION_DESCRIPTOR, ROLE_DESCRIPTOR
from app.services.named import create_named, delete_named, get_named, update_named
from app.services.projection import exists, fetch_all

logger = logging.getLogger(__name__)


def list_roles(db: Session) -> list[dict[str, Any]]:
    return fetch_all(db, ROLE_DESCRIPTOR)


def get_role(db: Session, role_id: int) -> dict[str, Any]:
    return get_named(db, ROLE_DESCRIPTOR, role_id)


def create_role(db: Session, name: str, description: str | None = None) -> dict[str, Any]:
    return create_named(db, ROLE_DESCRIPTOR, name, description)


def update_role(db: Session, role_id: int, fields: Mapping[str, Any]) -> dict[str, Any]:
    return update_named(db, ROLE_DESCRIPTOR, role_id, fields)


def delete_role(db: Session, role_id: int) -> None:
    delete_named(db, ROLE_DESCRIPTOR, role_id)


def replace_role_permissions(
    db: Session,
    role_id: int,
    permission_ids: Sequence[int],
) -> list[int]:
    """
    Make the role's permission set exactly permission_ids and return the attached ids.

    The role and every permission must exist (NotFoundError otherwise, with no
    change made). Existing links are deleted and the new set inserted in one
    transaction; on any failure the previous set is left intact.
    """
    if not permission_ids:
        raise ValueError("At least one permission ID is required")
    # Duplicates would collide on the (role_id, permission_id) unique key.
    wanted = list(dict.fromkeys(int(p) for p in permission_ids))

    if not exists(db, ROLE_DESCRIPTOR, role_id):
        raise NotFoundError("role", role_id, message="Role not found")

    found = db.execute(select(Permission.id).where(Permission.id.in_(wanted))).scalars().all()
    if len(found) != len(wanted):
        raise NotFoundError("permissions", message="One or more permissions not found")

    try:
        db.execute(delete(RolePermission).where(RolePermission.role_id == role_id))
        db.execute(
            insert(RolePermission),
            [{"role_id": role_id, "permission_id": pid} for pid in wanted],
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Role permissions replaced",
        extra={"role_id": role_id, "permission_count": len(wanted)},
    )
    return list(
        db.execute(
            select(RolePermission.permission_id)
            .where(RolePermission.role_id == role_id)
            .order_by(RolePermission.permission_id)
        ).scalars()
    )


def list_role_permissions(db: Session, role_id: int) -> list[dict[str, Any]]:
    """Permissions currently linked to an existing role, ordered by id."""
    if not exists(db, ROLE_DESCRIPTOR, role_id):
        raise NotFoundError("role", role_id)
    linked = select(RolePermission.permission_id).where(RolePermission.role_id == role_id)
    return fetch_all(db, PERMISSION_DESCRIPTOR, [Permission.id.in_(linked)])
