"""Tests for role and permission services, including permission-set replacement."""

import unittest
from datetime import datetime
from unittest.mock import patch

from sqlalchemy import func, select, update
from sqlalchemy.exc import OperationalError
from sqlalchemy.sql.dml import Insert

from app.core.errors import ConflictError, NotFoundError
from app.models import Permission, Role, RolePermission
from app.models.descriptors import ROLE_DESCRIPTOR, EntityDescriptor
from app.services.named import create_named, get_named
from app.services.permissions import (
    create_permission,
    delete_permission,
    get_permission,
    list_permissions,
    update_permission,
)
from app.services.roles import (
    create_role,
    delete_role,
    get_role,
    list_role_permissions,
    list_roles,
    replace_role_permissions,
    update_role,
)
from tests._db import add_permission, add_role, make_engine, make_session_factory


class RolesTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()
        self.db = make_session_factory(self.engine)()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()

    def linked(self, role_id: int) -> list[int]:
        return list(
            self.db.execute(
                select(RolePermission.permission_id)
                .where(RolePermission.role_id == role_id)
                .order_by(RolePermission.permission_id)
            ).scalars()
        )


class TestRoleCrud(RolesTestCase):
    def test_create_and_get(self) -> None:
        role = create_role(self.db, "auditor", "Reads everything")
        self.assertEqual(role["name"], "auditor")
        self.assertEqual(role["description"], "Reads everything")
        self.assertEqual(get_role(self.db, role["id"]), role)

    def test_duplicate_name_conflicts(self) -> None:
        create_role(self.db, "auditor")
        with self.assertRaises(ConflictError) as ctx:
            create_role(self.db, "auditor", "again")
        self.assertEqual(ctx.exception.resource, "role")
        self.assertEqual(ctx.exception.field, "name")
        self.assertEqual(len(list_roles(self.db)), 1)

    def test_list_is_ordered_by_id(self) -> None:
        add_role(self.db, "b-role")
        add_role(self.db, "a-role")
        self.assertEqual([r["name"] for r in list_roles(self.db)], ["b-role", "a-role"])

    def test_update_description(self) -> None:
        role_id = add_role(self.db, "support", "old")
        updated = update_role(self.db, role_id, {"description": "new"})
        self.assertEqual(updated["description"], "new")
        self.assertEqual(updated["name"], "support")

    def test_update_without_fields_returns_existing_row(self) -> None:
        role_id = add_role(self.db, "support", "same")
        self.assertEqual(update_role(self.db, role_id, {}), get_role(self.db, role_id))

    def test_update_rejects_name_change(self) -> None:
        role_id = add_role(self.db, "support")
        with self.assertRaises(ValueError):
            update_role(self.db, role_id, {"name": "renamed"})

    def test_missing_role(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            get_role(self.db, 3)
        self.assertEqual(ctx.exception.message, "Role not found by id: 3")
        with self.assertRaises(NotFoundError):
            update_role(self.db, 3, {"description": "x"})
        with self.assertRaises(NotFoundError):
            delete_role(self.db, 3)

    def test_delete_removes_links(self) -> None:
        role_id = add_role(self.db, "ops")
        perm_id = add_permission(self.db, "users.read")
        replace_role_permissions(self.db, role_id, [perm_id])

        delete_role(self.db, role_id)

        with self.assertRaises(NotFoundError):
            get_role(self.db, role_id)
        self.assertEqual(self.linked(role_id), [])
        # The permission itself survives.
        self.assertEqual(get_permission(self.db, perm_id)["name"], "users.read")


class TestPermissionCrud(RolesTestCase):
    def test_crud_cycle(self) -> None:
        created = create_permission(self.db, "users.write", "Edit users")
        self.assertEqual(list_permissions(self.db), [created])

        updated = update_permission(self.db, created["id"], {"description": "Edit any user"})
        self.assertEqual(updated["description"], "Edit any user")

        delete_permission(self.db, created["id"])
        self.assertEqual(list_permissions(self.db), [])

    def test_duplicate_name_conflicts(self) -> None:
        create_permission(self.db, "users.write")
        with self.assertRaises(ConflictError) as ctx:
            create_permission(self.db, "users.write")
        self.assertEqual(ctx.exception.resource, "permission")

    def test_missing_permission(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            get_permission(self.db, 9)
        self.assertEqual(ctx.exception.message, "Permission not found by id: 9")

    def test_deleting_permission_unlinks_it_from_roles(self) -> None:
        role_id = add_role(self.db, "ops")
        keep = add_permission(self.db, "a")
        drop = add_permission(self.db, "b")
        replace_role_permissions(self.db, role_id, [keep, drop])

        delete_permission(self.db, drop)

        self.assertEqual(self.linked(role_id), [keep])


class TestReplaceRolePermissions(RolesTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.role_id = add_role(self.db, "editor")
        self.p1 = add_permission(self.db, "posts.read")
        self.p2 = add_permission(self.db, "posts.write")
        self.p3 = add_permission(self.db, "posts.delete")

    def test_sets_exactly_the_given_ids(self) -> None:
        self.assertEqual(
            replace_role_permissions(self.db, self.role_id, [self.p1, self.p2]),
            [self.p1, self.p2],
        )
        self.assertEqual(
            replace_role_permissions(self.db, self.role_id, [self.p3]),
            [self.p3],
        )
        self.assertEqual(self.linked(self.role_id), [self.p3])
        self.assertEqual(
            [p["name"] for p in list_role_permissions(self.db, self.role_id)],
            ["posts.delete"],
        )

    def test_duplicates_are_collapsed(self) -> None:
        attached = replace_role_permissions(self.db, self.role_id, [self.p2, self.p1, self.p2])
        self.assertEqual(attached, [self.p1, self.p2])

    def test_missing_permission_keeps_previous_set(self) -> None:
        replace_role_permissions(self.db, self.role_id, [self.p1])
        with self.assertRaises(NotFoundError) as ctx:
            replace_role_permissions(self.db, self.role_id, [self.p2, 999])
        self.assertEqual(ctx.exception.message, "One or more permissions not found")
        self.assertEqual(self.linked(self.role_id), [self.p1])

    def test_missing_role(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            replace_role_permissions(self.db, 999, [self.p1])
        self.assertEqual(ctx.exception.message, "Role not found")

    def test_empty_list_rejected(self) -> None:
        with self.assertRaises(ValueError):
            replace_role_permissions(self.db, self.role_id, [])

    def test_failed_insert_rolls_back_the_delete(self) -> None:
        replace_role_permissions(self.db, self.role_id, [self.p1, self.p2])
        real_execute = self.db.execute

        def failing_execute(statement, *args, **kwargs):
            if isinstance(statement, Insert) and statement.table.name == "role_permissions":
                raise OperationalError("INSERT INTO role_permissions", {}, Exception("disk full"))
            return real_execute(statement, *args, **kwargs)

        with patch.object(self.db, "execute", side_effect=failing_execute):
            with self.assertRaises(OperationalError):
                replace_role_permissions(self.db, self.role_id, [self.p3])

        self.assertEqual(self.linked(self.role_id), [self.p1, self.p2])
        count = self.db.execute(select(func.count()).select_from(RolePermission)).scalar_one()
        self.assertEqual(count, 2)

    def test_list_for_missing_role(self) -> None:
        with self.assertRaises(NotFoundError):
            list_role_permissions(self.db, 999)


class TestUpdatedAtStamp(RolesTestCase):
    STALE = datetime(2020, 1, 1)

    def _age(self, model, entity_id: int) -> None:
        self.db.execute(update(model).where(model.id == entity_id).values(updated_at=self.STALE))
        self.db.commit()

    def test_role_update_stamps_updated_at(self) -> None:
        role_id = add_role(self.db, "support", "old")
        self._age(Role, role_id)

        updated = update_role(self.db, role_id, {"description": "new"})

        self.assertGreater(updated["updated_at"], self.STALE)

    def test_permission_update_stamps_updated_at(self) -> None:
        perm_id = add_permission(self.db, "users.read", "old")
        self._age(Permission, perm_id)

        updated = update_permission(self.db, perm_id, {"description": "new"})

        self.assertGreater(updated["updated_at"], self.STALE)


class TestResourceNames(RolesTestCase):
    """Error messages use the descriptor's resource name verbatim."""

    def setUp(self) -> None:
        super().setUp()
        self.descriptor = EntityDescriptor(
            model=Role,
            resource="access",
            columns=ROLE_DESCRIPTOR.columns,
        )

    def test_not_found_keeps_trailing_s(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            get_named(self.db, self.descriptor, 1)
        self.assertEqual(ctx.exception.resource, "access")
        self.assertEqual(ctx.exception.message, "Access not found by id: 1")

    def test_conflict_keeps_trailing_s(self) -> None:
        create_named(self.db, self.descriptor, "ops")
        with self.assertRaises(ConflictError) as ctx:
            create_named(self.db, self.descriptor, "ops")
        self.assertEqual(ctx.exception.resource, "access")


if __name__ == "__main__":
    unittest.main()
