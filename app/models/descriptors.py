"""
Per-entity column descriptors shared by listing, single fetch, and sorting.

Each descriptor names the columns a caller may see (projectable) and the
columns a caller may order by (sortable). A sortable name may be derived:
it then expands to several physical columns (e.g. users "name" sorts by
first_name, then last_name) and is never projected itself.
"""

from dataclasses import dataclass

from sqlalchemy import Column

from app.models.base import Base
from app.models.role import Permission, Role
from app.models.user import Purchase, User, UserDevice


@dataclass(frozen=True)
class ColumnSpec:
    """One column (or derived sort key) of an entity."""

    name: str
    sortable: bool = True
    projectable: bool = True
    sort_columns: tuple[str, ...] | None = None


@dataclass(frozen=True)
class EntityDescriptor:
    """
    Column whitelist for one ORM model; the model's 'id' is always the tie-break.

    resource is the singular name used in error messages (e.g. "role").
    """

    model: type[Base]
    resource: str
    columns: tuple[ColumnSpec, ...]

    @property
    def id_column(self) -> Column:
        return self.model.__table__.c.id

    @property
    def sortable_columns(self) -> tuple[str, ...]:
        return tuple(c.name for c in self.columns if c.sortable)

    @property
    def projectable_columns(self) -> tuple[str, ...]:
        return tuple(c.name for c in self.columns if c.projectable)

    def projection(self) -> list[Column]:
        """Table columns for SELECT, in declaration order."""
        table = self.model.__table__
        return [table.c[name] for name in self.projectable_columns]

    def sort_columns(self, name: str) -> list[Column]:
        """Physical columns behind a sortable name. KeyError when not sortable."""
        specs = {c.name: c for c in self.columns if c.sortable}
        spec = specs[name]
        table = self.model.__table__
        return [table.c[n] for n in (spec.sort_columns or (spec.name,))]


def _specs(*names: str) -> tuple[ColumnSpec, ...]:
    return tuple(ColumnSpec(name) for name in names)


# password is intentionally absent: never listed, fetched, or sortable.
USER_DESCRIPTOR = EntityDescriptor(
    model=User,
    resource="user",
    columns=_specs(
        "id",
        "uuid",
        "role_id",
        "email",
        "first_name",
        "last_name",
        "phone",
        "status",
        "identity_status",
        "identity_verified_at",
        "ref_by_user_id",
        "ref_link_count",
        "affiliate_terms",
        "last_login_at",
        "created_at",
        "updated_at",
    )
    + (
        ColumnSpec(
            "name",
            projectable=False,
            sort_columns=("first_name", "last_name"),
        ),
    ),
)

PURCHASE_DESCRIPTOR = EntityDescriptor(
    model=Purchase,
    resource="purchase",
    columns=_specs(
        "id",
        "user_id",
        "amount_total",
        "currency",
        "payment_method",
        "payment_status",
        "created_at",
    ),
)

USER_DEVICE_DESCRIPTOR = EntityDescriptor(
    model=UserDevice,
    resource="device",
    columns=_specs(
        "id",
        "user_id",
        "browser",
        "os",
        "device",
        "ip",
        "location_info",
        "created_at",
    ),
)

ROLE_DESCRIPTOR = EntityDescriptor(
    model=Role,
    resource="role",
    columns=_specs("id", "name", "description", "created_at", "updated_at"),
)

PERMISSION_DESCRIPTOR = EntityDescriptor(
    model=Permission,
    resource="permission",
    columns=_specs("id", "name", "description", "created_at", "updated_at"),
)
