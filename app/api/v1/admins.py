"""Admin endpoints: cursor-paginated admin listing, admin creation, and aggregate counts."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.v1.params import PageParams, page_params
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.roles import ADMIN_ROLE_IDS
from app.schemas.pagination import Pagination
from app.schemas.users import (
    AdminCountsResponse,
    AdminCreate,
    UserOut,
    UsersListResponse,
)
from app.services.users import create_admin, get_admin_counts, list_users

router = APIRouter()


@router.get("", response_model=UsersListResponse)
def get_admins(
    db: Annotated[Session, Depends(get_db)],
    params: Annotated[PageParams, Depends(page_params)],
) -> UsersListResponse:
    """
    List users holding any admin role, one page at a time.

    Pass pagination.nextCursor back as `cursor` to fetch the next page.
    """
    page = list_users(
        db,
        role_ids=ADMIN_ROLE_IDS,
        order_by=params.order_by,
        direction=params.direction,
        limit=params.limit,
        cursor=params.cursor,
    )
    return UsersListResponse(
        users=[UserOut.model_validate(item) for item in page.items],
        pagination=Pagination.from_page(page),
    )


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def post_admin(
    body: AdminCreate,
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    """Create an admin user. 409 when the email is already registered."""
    data = body.model_dump(exclude={"role_id", "password"}, exclude_none=True)
    admin = create_admin(db, data, role_id=body.role_id, password=body.password)
    return UserOut.model_validate(admin)


@router.get("/count", response_model=AdminCountsResponse)
def get_admin_count(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AdminCountsResponse:
    """Total admins, active admins, and admins who logged in within ADMIN_RECENT_LOGIN_DAYS."""
    counts = get_admin_counts(
        db,
        ADMIN_ROLE_IDS,
        recent_days=settings.ADMIN_RECENT_LOGIN_DAYS,
    )
    return AdminCountsResponse(
        total=counts.total,
        active=counts.active,
        recently_active=counts.recently_active,
    )
