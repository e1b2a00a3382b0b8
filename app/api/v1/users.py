"""User endpoints: listing, single-row fetch/update/delete, and user-scoped purchases and devices."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.api.v1.params import PageParams, page_params
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.roles import REGULAR_USER_ROLE_IDS
from app.schemas.pagination import Pagination
from app.schemas.users import (
    DeviceOut,
    DevicesResponse,
    PurchaseOut,
    PurchasesListResponse,
    UserOut,
    UsersListResponse,
    UserUpdate,
)
from app.services.users import (
    delete_user,
    get_user,
    list_user_devices,
    list_user_purchases,
    list_users,
    update_user,
)

router = APIRouter()

UserId = Annotated[int, Path(ge=1, description="User id")]


@router.get("", response_model=UsersListResponse)
def get_users(
    db: Annotated[Session, Depends(get_db)],
    params: Annotated[PageParams, Depends(page_params)],
) -> UsersListResponse:
    """List regular (non-admin) users, one page at a time."""
    page = list_users(
        db,
        role_ids=REGULAR_USER_ROLE_IDS,
        order_by=params.order_by,
        direction=params.direction,
        limit=params.limit,
        cursor=params.cursor,
    )
    return UsersListResponse(
        users=[UserOut.model_validate(item) for item in page.items],
        pagination=Pagination.from_page(page),
    )


@router.get("/{user_id}", response_model=UserOut)
def get_user_by_id(
    user_id: UserId,
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    return UserOut.model_validate(get_user(db, user_id))


@router.put("/{user_id}", response_model=UserOut)
def put_user(
    user_id: UserId,
    body: UserUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    """
    Partially update a user (email, names, phone, status). 404 if absent, 409 on a taken email.

    Only fields present in the body are written; an explicit null clears a nullable field.
    """
    fields = body.model_dump(exclude_unset=True)
    return UserOut.model_validate(update_user(db, user_id, fields))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_user(
    user_id: UserId,
    db: Annotated[Session, Depends(get_db)],
) -> None:
    """Hard delete a user together with their purchases and devices."""
    delete_user(db, user_id)


@router.get("/{user_id}/purchases", response_model=PurchasesListResponse)
def get_user_purchases(
    user_id: UserId,
    db: Annotated[Session, Depends(get_db)],
    params: Annotated[PageParams, Depends(page_params)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PurchasesListResponse:
    """
    List one user's purchases, one page at a time.

    404 when the user does not exist. With PURCHASES_EMPTY_AS_NOT_FOUND (the
    default) an empty page is also answered with 404.
    """
    page = list_user_purchases(
        db,
        user_id,
        order_by=params.order_by,
        direction=params.direction,
        limit=params.limit,
        cursor=params.cursor,
        empty_as_not_found=settings.PURCHASES_EMPTY_AS_NOT_FOUND,
    )
    return PurchasesListResponse(
        purchases=[PurchaseOut.model_validate(item) for item in page.items],
        pagination=Pagination.from_page(page),
    )


@router.get("/{user_id}/devices", response_model=DevicesResponse)
def get_user_devices(
    user_id: UserId,
    db: Annotated[Session, Depends(get_db)],
) -> DevicesResponse:
    devices = list_user_devices(db, user_id)
    return DevicesResponse(devices=[DeviceOut.model_validate(d) for d in devices])
