"""User and admin access: cursor listings, single-row CRUD, admin counts, and user-scoped purchases/devices."""

import logging
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError
from app.core.roles import UserRole, UserStatus
from app.core.security import hash_password
from app.models import Purchase, User, UserDevice
from app.models.descriptors import (
    PURCHASE_DESCRIPTOR,
    USER_DESCRIPTOR,
    USER_DEVICE_DESCRIPTOR,
)
from app.services.pagination import DEFAULT_PAGE_LIMIT, Page, count_rows, paginate
from app.services.projection import exists, fetch_all, fetch_one

logger = logging.getLogger(__name__)

# Columns a partial update may touch (password and identity fields are not editable here).
USER_UPDATE_FIELDS: frozenset[str] = frozenset(
    {"email", "first_name", "last_name", "phone", "status"}
)

ADMIN_CREATE_FIELDS: frozenset[str] = frozenset(
    {
        "email",
        "first_name",
        "last_name",
        "phone",
        "address",
        "country",
        "state",
        "zip",
        "timezone",
        "status",
    }
)

DEFAULT_RECENT_LOGIN_DAYS = 7


@dataclass(frozen=True)
class AdminCounts:
    total: int
    active: int
    recently_active: int


def _require_user(db: Session, user_id: int) -> None:
    if not exists(db, USER_DESCRIPTOR, user_id):
        raise NotFoundError(USER_DESCRIPTOR.resource, user_id)


def _ensure_email_free(db: Session, email: str, exclude_user_id: int | None = None) -> None:
    stmt = select(User.id).where(User.email == email)
    if exclude_user_id is not None:
        stmt = stmt.where(User.id != exclude_user_id)
    if db.execute(stmt).first() is not None:
        raise ConflictError("user", "email", email)


def list_users(
    db: Session,
    *,
    role_ids: Iterable[int] | None = None,
    order_by: str = "id",
    direction: str = "asc",
    limit: int = DEFAULT_PAGE_LIMIT,
    cursor: int | None = None,
) -> Page:
    """One page of users, optionally restricted to a set of role ids."""
    filters = []
    if role_ids is not None:
        filters.append(User.role_id.in_([int(r) for r in role_ids]))
    return paginate(
        db,
        USER_DESCRIPTOR,
        filters=filters,
        order_by=order_by,
        direction=direction,
        limit=limit,
        cursor=cursor,
    )


def get_user(db: Session, user_id: int) -> dict[str, Any]:
    """Projected user row. Raises NotFoundError."""
    user = fetch_one(db, USER_DESCRIPTOR, user_id)
    if user is None:
        raise NotFoundError(USER_DESCRIPTOR.resource, user_id)
    return user


def update_user(db: Session, user_id: int, fields: Mapping[str, Any]) -> dict[str, Any]:
    """
    Apply a partial update and return the updated row.

    The row must exist before the write; if it disappears between the check
    and the UPDATE the zero-row result is also reported as NotFoundError.
    """
    unknown = set(fields) - USER_UPDATE_FIELDS
    if unknown:
        raise ValueError(f"Fields not updatable: {sorted(unknown)}")

    _require_user(db, user_id)
    values = dict(fields)
    if values.get("email") is not None:
        _ensure_email_free(db, values["email"], exclude_user_id=user_id)
    values["updated_at"] = datetime.now(UTC)

    try:
        result = db.execute(update(User).where(User.id == user_id).values(**values))
        if result.rowcount == 0:
            db.rollback()
            raise NotFoundError(USER_DESCRIPTOR.resource, user_id)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("user", "email", values.get("email")) from e

    logger.info("User updated", extra={"user_id": user_id, "fields": sorted(fields)})
    return get_user(db, user_id)


def delete_user(db: Session, user_id: int) -> None:
    """Hard delete. Purchases and devices go with the user (ON DELETE CASCADE)."""
    result = db.execute(delete(User).where(User.id == user_id))
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(USER_DESCRIPTOR.resource, user_id)
    db.commit()
    logger.info("User deleted", extra={"user_id": user_id})


def create_admin(
    db: Session,
    data: Mapping[str, Any],
    *,
    role_id: int = UserRole.ADMIN,
    password: str | None = None,
) -> dict[str, Any]:
    """Insert an admin-role user with a fresh uuid. Raises ConflictError on a taken email."""
    unknown = set(data) - ADMIN_CREATE_FIELDS
    if unknown:
        raise ValueError(f"Fields not accepted for admin creation: {sorted(unknown)}")

    email = data["email"]
    _ensure_email_free(db, email)

    user = User(
        uuid=str(uuid.uuid4()),
        role_id=int(role_id),
        password=hash_password(password) if password else None,
        **data,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("user", "email", email) from e

    logger.info("Admin created", extra={"user_id": user.id, "role_id": int(role_id)})
    return get_user(db, user.id)


def get_admin_counts(
    db: Session,
    role_ids: Iterable[int],
    *,
    now: datetime | None = None,
    recent_days: int = DEFAULT_RECENT_LOGIN_DAYS,
) -> AdminCounts:
    """
    Three independent counts over users in role_ids: all of them, those with
    status active, and those whose last login falls within recent_days of now.
    """
    in_roles = User.role_id.in_([int(r) for r in role_ids])
    since = (now or datetime.now(UTC)) - timedelta(days=recent_days)
    return AdminCounts(
        total=count_rows(db, USER_DESCRIPTOR, [in_roles]),
        active=count_rows(db, USER_DESCRIPTOR, [in_roles, User.status == UserStatus.ACTIVE]),
        recently_active=count_rows(db, USER_DESCRIPTOR, [in_roles, User.last_login_at >= since]),
    )


def list_user_purchases(
    db: Session,
    user_id: int,
    *,
    order_by: str = "id",
    direction: str = "asc",
    limit: int = DEFAULT_PAGE_LIMIT,
    cursor: int | None = None,
    empty_as_not_found: bool = True,
) -> Page:
    """
    One page of the user's purchases.

    Raises NotFoundError for an unknown user and, when empty_as_not_found is
    set, for an empty page (no purchases at all, or a cursor past the end).
    """
    _require_user(db, user_id)
    page = paginate(
        db,
        PURCHASE_DESCRIPTOR,
        filters=[Purchase.user_id == user_id],
        order_by=order_by,
        direction=direction,
        limit=limit,
        cursor=cursor,
    )
    if empty_as_not_found and not page.items:
        raise NotFoundError("purchases", message=f"No purchases found for user: {user_id}")
    return page


def list_user_devices(db: Session, user_id: int) -> list[dict[str, Any]]:
    """All devices of an existing user, oldest first; an empty list is a valid result."""
    _require_user(db, user_id)
    return fetch_all(db, USER_DEVICE_DESCRIPTOR, [UserDevice.user_id == user_id])
