"""Permission access: CRUD with name uniqueness."""

from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from app.models.descriptors import PERMISSION_DESCRIPTOR
from app.services.named import create_named, delete_named, get_named, update_named
from app.services.projection import fetch_all


def list_permissions(db: Session) -> list[dict[str, Any]]:
    return fetch_all(db, PERMISSION_DESCRIPTOR)


def get_permission(db: Session, permission_id: int) -> dict[str, Any]:
    return get_named(db, PERMISSION_DESCRIPTOR, permission_id)


def create_permission(db: Session, name: str, description: str | None = None) -> dict[str, Any]:
    return create_named(db, PERMISSION_DESCRIPTOR, name, description)


def update_permission(db: Session, permission_id: int, fields: Mapping[str, Any]) -> dict[str, Any]:
    return update_named(db, PERMISSION_DESCRIPTOR, permission_id, fields)


def delete_permission(db: Session, permission_id: int) -> None:
    """Delete a permission; it disappears from every role that had it."""
    delete_named(db, PERMISSION_DESCRIPTOR, permission_id)
