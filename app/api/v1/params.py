"""Query parameters shared by the cursor-paginated list endpoints."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Query, status

from app.core.config import Settings, get_settings


@dataclass(frozen=True)
class PageParams:
    cursor: int | None
    limit: int
    order_by: str
    direction: str


def page_params(
    settings: Annotated[Settings, Depends(get_settings)],
    cursor: Annotated[
        int | None, Query(ge=1, description="Id of the last row of the previous page")
    ] = None,
    limit: Annotated[int | None, Query(ge=1, description="Page size")] = None,
    order_by: Annotated[str, Query(description="Column to sort by")] = "id",
    order_by_direction: Annotated[str, Query(description="asc or desc")] = "asc",
) -> PageParams:
    """
    Resolve paging query parameters. Sort column and direction are checked by
    the pagination engine against the entity whitelist (400 when invalid).
    """
    if limit is None:
        limit = settings.PAGINATION_DEFAULT_LIMIT
    elif limit > settings.PAGINATION_MAX_LIMIT:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"limit must be at most {settings.PAGINATION_MAX_LIMIT}.",
        )
    return PageParams(
        cursor=cursor,
        limit=limit,
        order_by=order_by,
        direction=order_by_direction,
    )
