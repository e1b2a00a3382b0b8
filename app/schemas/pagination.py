"""Pagination metadata returned alongside every cursor-paginated list."""

from typing import Literal

from pydantic import BaseModel, Field

from app.services.pagination import Page


class OrderBy(BaseModel):
    column: str
    direction: Literal["asc", "desc"]


class Pagination(BaseModel):
    """Serialized as {hasMore, nextCursor, total, limit, orderBy}."""

    model_config = {"populate_by_name": True}

    has_more: bool = Field(alias="hasMore")
    next_cursor: int | None = Field(default=None, alias="nextCursor")
    total: int = Field(ge=0, description="Size of the whole filtered collection")
    limit: int = Field(ge=1)
    order_by: OrderBy = Field(alias="orderBy")

    @classmethod
    def from_page(cls, page: Page) -> "Pagination":
        return cls(
            has_more=page.has_more,
            next_cursor=page.next_cursor,
            total=page.total,
            limit=page.limit,
            order_by=OrderBy(
                column=page.order_by.column,
                direction=page.order_by.direction,
            ),
        )
