"""Request/response schemas for user, admin, purchase, and device endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from app.core.roles import ADMIN_ROLE_IDS, UserRole
from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.schemas.pagination import Pagination


class UserOut(BaseModel):
    """User as listed or fetched (never includes the password)."""

    id: int
    uuid: str | None = None
    role_id: int | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    status: int
    identity_status: str | None = None
    identity_verified_at: datetime | None = None
    ref_by_user_id: int = 0
    ref_link_count: int = 0
    affiliate_terms: int = 0
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class UsersListResponse(BaseModel):
    users: list[UserOut]
    pagination: Pagination


class UserUpdate(BaseModel):
    """
    Partial update; at least one field must be provided.

    An explicit null clears first_name, last_name, or phone. email and status
    cannot be cleared.
    """

    model_config = {"extra": "forbid"}

    email: EmailStr | None = None
    first_name: str | None = Field(default=None, min_length=2, max_length=50)
    last_name: str | None = Field(default=None, min_length=2, max_length=50)
    phone: str | None = Field(default=None, max_length=64)
    status: int | None = Field(default=None, ge=0, le=2, description="0 inactive, 1 active, 2 banned")

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str | None) -> str | None:
        return v.lower() if v is not None else None

    @model_validator(mode="after")
    def check_fields(self) -> "UserUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update")
        for name in ("email", "status"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class AdminCreate(BaseModel):
    """Body for POST /admins."""

    model_config = {"extra": "forbid"}

    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=64)
    address: str | None = Field(default=None, max_length=255)
    country: str | None = Field(default=None, max_length=255)
    state: str | None = Field(default=None, max_length=255)
    zip: str | None = Field(default=None, max_length=32)
    timezone: str | None = Field(default=None, max_length=64)
    status: int = Field(default=0, ge=0, le=2)
    role_id: int = Field(default=UserRole.ADMIN, description="One of the admin role ids")
    password: str | None = Field(
        default=None,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
    )

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("role_id")
    @classmethod
    def validate_role_id(cls, v: int) -> int:
        if v not in ADMIN_ROLE_IDS:
            raise ValueError(f"role_id must be one of {sorted(int(r) for r in ADMIN_ROLE_IDS)}")
        return v


class AdminCountsResponse(BaseModel):
    """Serialized as {total, active, recentlyActive}."""

    model_config = {"populate_by_name": True}

    total: int
    active: int
    recently_active: int = Field(alias="recentlyActive")


class PurchaseOut(BaseModel):
    id: int
    user_id: int
    amount_total: Decimal
    currency: str
    payment_method: str | None = None
    payment_status: int
    created_at: datetime


class PurchasesListResponse(BaseModel):
    purchases: list[PurchaseOut]
    pagination: Pagination


class DeviceOut(BaseModel):
    id: int
    user_id: int
    browser: str | None = None
    os: str | None = None
    device: str | None = None
    ip: str | None = None
    location_info: str
    created_at: datetime


class DevicesResponse(BaseModel):
    devices: list[DeviceOut]
