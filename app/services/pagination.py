"""
Cursor pagination over any entity described by an EntityDescriptor.

Rows are ordered by the requested column, then by id in the same direction,
so the order is total even when the sort column repeats values. The cursor
handed back to callers is the id of the last row on the page. Resuming from
it seeks strictly past that row's (sort values, id) position, so each row is
returned exactly once across pages when nothing is written in between.
"""

import logging
import operator
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal

from sqlalchemy import ColumnElement, and_, case, func, or_, select
from sqlalchemy.orm import Session

from app.core.errors import (
    InvalidPageLimitError,
    InvalidSortColumnError,
    InvalidSortDirectionError,
)
from app.models.descriptors import EntityDescriptor

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 25
SORT_DIRECTIONS: tuple[str, ...] = ("asc", "desc")

SortDirection = Literal["asc", "desc"]


@dataclass(frozen=True)
class SortOrder:
    column: str
    direction: SortDirection


@dataclass
class Page:
    """
    One page of a listing.

    has_more is True only when a row exists past this page; next_cursor is
    then the id of the last item, and None otherwise.
    """

    items: list[dict[str, Any]]
    has_more: bool
    next_cursor: int | None
    total: int
    limit: int
    order_by: SortOrder


def validate_sort(descriptor: EntityDescriptor, order_by: str, direction: str) -> None:
    """Reject an order_by outside the entity whitelist or a direction other than asc/desc."""
    if order_by not in descriptor.sortable_columns:
        raise InvalidSortColumnError(order_by, descriptor.sortable_columns)
    if direction not in SORT_DIRECTIONS:
        raise InvalidSortDirectionError(direction)


def _sort_keys(descriptor: EntityDescriptor, order_by: str) -> list[ColumnElement]:
    """
    Primary sort expressions, without the id tie-break.

    A nullable column is preceded by a NULL-rank key so NULLs sort after
    values ascending (before them descending) on every backend.
    """
    if order_by == "id":
        return []
    keys: list[ColumnElement] = []
    for column in descriptor.sort_columns(order_by):
        if column.nullable:
            keys.append(case((column.is_(None), 1), else_=0))
        keys.append(column)
    return keys


def _seek_condition(
    keys: Sequence[ColumnElement],
    anchor: Sequence[Any],
    id_column: ColumnElement,
    cursor: int,
    direction: str,
) -> ColumnElement[bool]:
    """
    Rows strictly after the anchor in (keys..., id) lexicographic order.

    A NULL anchor value has nothing strictly past it within its NULL-rank
    group, so it only contributes an IS NULL equality to later branches.
    """
    past = operator.gt if direction == "asc" else operator.lt
    branches: list[ColumnElement[bool]] = []
    equal_prefix: list[ColumnElement[bool]] = []
    for key, value in zip(keys, anchor):
        if value is None:
            equal_prefix.append(key.is_(None))
            continue
        branches.append(and_(*equal_prefix, past(key, value)))
        equal_prefix.append(key == value)
    branches.append(and_(*equal_prefix, past(id_column, cursor)))
    return or_(*branches)


def count_rows(
    db: Session,
    descriptor: EntityDescriptor,
    filters: Sequence[ColumnElement[bool]] = (),
) -> int:
    """Number of rows matching filters (the whole filtered collection, not one page)."""
    stmt = select(func.count()).select_from(descriptor.model.__table__).where(*filters)
    return db.execute(stmt).scalar_one()


def paginate(
    db: Session,
    descriptor: EntityDescriptor,
    *,
    filters: Sequence[ColumnElement[bool]] = (),
    order_by: str = "id",
    direction: str = "asc",
    limit: int = DEFAULT_PAGE_LIMIT,
    cursor: int | None = None,
) -> Page:
    """
    Return one page of descriptor's projection matching filters.

    Raises InvalidSortColumnError, InvalidSortDirectionError, or
    InvalidPageLimitError before touching the database.
    """
    validate_sort(descriptor, order_by, direction)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidPageLimitError(limit)

    id_column = descriptor.id_column
    keys = _sort_keys(descriptor, order_by)

    stmt = select(*descriptor.projection()).where(*filters)

    if cursor is not None:
        anchor: Sequence[Any] = ()
        if keys:
            row = db.execute(select(*keys).where(id_column == cursor)).first()
            if row is None:
                # Cursor row deleted since the previous page: resume on id alone.
                logger.debug(
                    "Pagination cursor row missing; seeking on id only",
                    extra={"table": descriptor.model.__tablename__, "cursor": cursor},
                )
                keys_for_seek: Sequence[ColumnElement] = ()
            else:
                anchor = tuple(row)
                keys_for_seek = keys
        else:
            keys_for_seek = ()
        stmt = stmt.where(
            _seek_condition(keys_for_seek, anchor, id_column, cursor, direction)
        )

    ordering = [
        key.asc() if direction == "asc" else key.desc()
        for key in (*keys, id_column)
    ]
    # One extra row tells whether another page exists.
    stmt = stmt.order_by(*ordering).limit(limit + 1)

    rows = db.execute(stmt).mappings().all()
    has_more = len(rows) > limit
    items = [dict(row) for row in rows[:limit]]
    next_cursor = items[-1]["id"] if has_more else None

    return Page(
        items=items,
        has_more=has_more,
        next_cursor=next_cursor,
        total=count_rows(db, descriptor, filters),
        limit=limit,
        order_by=SortOrder(column=order_by, direction=direction),  # type: ignore[arg-type]
    )
