"""Enumerated user roles and account statuses stored on users.role_id / users.status."""

from enum import IntEnum


class UserRole(IntEnum):
    ADMIN = 1
    USER = 2
    MASTER_ADMIN = 3
    SUBADMIN = 4
    CUSTOMER_SUPPORT = 5
    TECH_SUPPORT = 6
    MANAGER = 7


class UserStatus(IntEnum):
    INACTIVE = 0
    ACTIVE = 1
    BANNED = 2


# Roles listed and counted by the /admins endpoints.
ADMIN_ROLE_IDS: tuple[int, ...] = (
    UserRole.ADMIN,
    UserRole.MASTER_ADMIN,
    UserRole.SUBADMIN,
    UserRole.CUSTOMER_SUPPORT,
    UserRole.TECH_SUPPORT,
    UserRole.MANAGER,
)

REGULAR_USER_ROLE_IDS: tuple[int, ...] = (UserRole.USER,)
