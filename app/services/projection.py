"""Unpaginated reads through an entity descriptor's projection."""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import ColumnElement, select
from sqlalchemy.orm import Session

from app.models.descriptors import EntityDescriptor


def fetch_one(db: Session, descriptor: EntityDescriptor, entity_id: int) -> dict[str, Any] | None:
    """Projected row with the given id, or None."""
    stmt = select(*descriptor.projection()).where(descriptor.id_column == entity_id)
    row = db.execute(stmt).mappings().first()
    return dict(row) if row is not None else None


def fetch_all(
    db: Session,
    descriptor: EntityDescriptor,
    filters: Sequence[ColumnElement[bool]] = (),
) -> list[dict[str, Any]]:
    """All projected rows matching filters, ordered by id."""
    stmt = (
        select(*descriptor.projection())
        .where(*filters)
        .order_by(descriptor.id_column.asc())
    )
    return [dict(row) for row in db.execute(stmt).mappings().all()]


def exists(db: Session, descriptor: EntityDescriptor, entity_id: int) -> bool:
    stmt = select(descriptor.id_column).where(descriptor.id_column == entity_id)
    return db.execute(stmt).first() is not None
