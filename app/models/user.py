"""ORM models for users and the records scoped to them (purchases, devices)."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    SmallInteger,
    String,
    func,
)

from app.models.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """
    Account record for both regular users and admins.

    role_id: member of app.core.roles.UserRole (no FK; the role set is enumerated)
    status: 0 inactive, 1 active, 2 banned
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(String(36), nullable=True)
    role_id = Column(Integer, nullable=True, index=True)
    email = Column(String(255), nullable=True, unique=True, index=True)
    password = Column(String(255), nullable=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    phone = Column(String(64), nullable=True)
    status = Column(Integer, nullable=False, default=0, server_default="0", index=True)
    address = Column(String(255), nullable=True)
    country = Column(String(255), nullable=True)
    state = Column(String(255), nullable=True)
    zip = Column(String(32), nullable=True)
    timezone = Column(String(64), nullable=True)
    identity_status = Column(String(64), nullable=True)
    identity_verified_at = Column(DateTime(timezone=True), nullable=True)
    ref_by_user_id = Column(Integer, nullable=False, default=0, server_default="0")
    ref_link_count = Column(Integer, nullable=False, default=0, server_default="0")
    affiliate_terms = Column(Integer, nullable=False, default=0, server_default="0")
    last_login_at = Column(DateTime(timezone=True), nullable=True)


class Purchase(Base):
    """Purchase made by one user; removed with the user."""

    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    amount_total = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(10), nullable=False, default="USD", server_default="USD")
    payment_method = Column(String(255), nullable=True)
    payment_status = Column(
        SmallInteger, nullable=False, default=0, server_default="0", index=True
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class UserDevice(Base):
    """Device/browser a user signed in from."""

    __tablename__ = "user_devices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    browser = Column(String(255), nullable=True)
    os = Column(String(255), nullable=True)
    device = Column(String(255), nullable=True)
    ip = Column(String(255), nullable=True)
    location_info = Column(String(255), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
