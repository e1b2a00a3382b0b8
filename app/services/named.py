"""Create/update/delete for entities identified by a unique name (roles, permissions)."""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError
from app.models.descriptors import EntityDescriptor
from app.services.projection import fetch_one

logger = logging.getLogger(__name__)

NAMED_UPDATE_FIELDS: frozenset[str] = frozenset({"description"})


def get_named(db: Session, descriptor: EntityDescriptor, entity_id: int) -> dict[str, Any]:
    row = fetch_one(db, descriptor, entity_id)
    if row is None:
        raise NotFoundError(descriptor.resource, entity_id)
    return row


def create_named(
    db: Session,
    descriptor: EntityDescriptor,
    name: str,
    description: str | None = None,
) -> dict[str, Any]:
    """Insert a row after checking the name is free. Raises ConflictError."""
    table = descriptor.model.__table__
    resource = descriptor.resource
    if db.execute(select(table.c.id).where(table.c.name == name)).first() is not None:
        raise ConflictError(resource, "name", name)

    try:
        new_id = db.execute(
            insert(table).values(name=name, description=description).returning(table.c.id)
        ).scalar_one()
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent insert of the same name.
        db.rollback()
        raise ConflictError(resource, "name", name) from e

    logger.info("%s created", resource.capitalize(), extra={"id": new_id, "entity_name": name})
    return get_named(db, descriptor, new_id)


def update_named(
    db: Session,
    descriptor: EntityDescriptor,
    entity_id: int,
    fields: Mapping[str, Any],
) -> dict[str, Any]:
    """
    Update an existing row and return it. If the UPDATE affects no row even
    though the row existed, the pre-update row is returned unchanged.
    """
    unknown = set(fields) - NAMED_UPDATE_FIELDS
    if unknown:
        raise ValueError(f"Fields not updatable: {sorted(unknown)}")

    existing = get_named(db, descriptor, entity_id)
    if not fields:
        return existing

    table = descriptor.model.__table__
    result = db.execute(
        update(table)
        .where(table.c.id == entity_id)
        .values(**fields, updated_at=datetime.now(UTC))
    )
    db.commit()
    if result.rowcount == 0:
        return existing
    return fetch_one(db, descriptor, entity_id) or existing


def delete_named(db: Session, descriptor: EntityDescriptor, entity_id: int) -> None:
    """Delete an existing row; dependent role_permissions rows cascade in the database."""
    get_named(db, descriptor, entity_id)
    table = descriptor.model.__table__
    result = db.execute(delete(table).where(table.c.id == entity_id))
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(descriptor.resource, entity_id)
    db.commit()
    logger.info("%s deleted", descriptor.resource.capitalize(), extra={"id": entity_id})
