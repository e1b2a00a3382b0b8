"""Tests for the cursor pagination engine: ordering, page boundaries, and input validation."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy import delete

from app.core.errors import (
    InvalidPageLimitError,
    InvalidSortColumnError,
    InvalidSortDirectionError,
)
from app.models import User
from app.models.descriptors import PURCHASE_DESCRIPTOR, USER_DESCRIPTOR
from app.services.pagination import count_rows, paginate
from tests._db import add_user, make_engine, make_session_factory

# (email, first_name, last_name, status); inserted in order so ids are 1..7.
_USERS = [
    ("a@example.com", "Ada", "Lovelace", 1),
    ("b@example.com", None, None, 0),
    ("c@example.com", "Ada", "Byron", 1),
    ("d@example.com", "Grace", "Hopper", 2),
    ("e@example.com", None, None, 0),
    ("f@example.com", "Alan", "Turing", 1),
    ("g@example.com", "Ada", None, 0),
]


def _walk(db, limit: int, **kwargs) -> list[int]:
    """Follow next_cursor until has_more is False; return ids in page order."""
    ids: list[int] = []
    cursor = None
    for _ in range(50):
        page = paginate(db, USER_DESCRIPTOR, limit=limit, cursor=cursor, **kwargs)
        ids.extend(item["id"] for item in page.items)
        if not page.has_more:
            return ids
        cursor = page.next_cursor
    raise AssertionError("pagination did not terminate")


class PaginationTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()
        self.db = make_session_factory(self.engine)()
        for email, first, last, status in _USERS:
            add_user(self.db, email=email, first_name=first, last_name=last, status=status)

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()


class TestPageBoundaries(PaginationTestCase):
    def test_first_page_has_more_and_cursor_is_last_id(self) -> None:
        page = paginate(self.db, USER_DESCRIPTOR, limit=3)
        self.assertEqual([u["id"] for u in page.items], [1, 2, 3])
        self.assertTrue(page.has_more)
        self.assertEqual(page.next_cursor, 3)
        self.assertEqual(page.total, 7)
        self.assertEqual(page.limit, 3)
        self.assertEqual(page.order_by.column, "id")
        self.assertEqual(page.order_by.direction, "asc")

    def test_last_page_has_no_cursor(self) -> None:
        page = paginate(self.db, USER_DESCRIPTOR, limit=3, cursor=6)
        self.assertEqual([u["id"] for u in page.items], [7])
        self.assertFalse(page.has_more)
        self.assertIsNone(page.next_cursor)
        self.assertEqual(page.total, 7)

    def test_exact_multiple_of_limit_ends_without_more(self) -> None:
        page = paginate(self.db, USER_DESCRIPTOR, limit=7)
        self.assertEqual(len(page.items), 7)
        self.assertFalse(page.has_more)
        self.assertIsNone(page.next_cursor)

    def test_cursor_past_end_returns_empty_page(self) -> None:
        page = paginate(self.db, USER_DESCRIPTOR, limit=3, cursor=99)
        self.assertEqual(page.items, [])
        self.assertFalse(page.has_more)
        self.assertEqual(page.total, 7)

    def test_total_counts_filtered_collection(self) -> None:
        page = paginate(self.db, USER_DESCRIPTOR, filters=[User.status == 0], limit=1)
        self.assertEqual(page.total, 3)
        self.assertEqual(count_rows(self.db, USER_DESCRIPTOR, [User.status == 1]), 3)
        self.assertEqual(count_rows(self.db, USER_DESCRIPTOR), 7)

    def test_password_is_never_projected(self) -> None:
        page = paginate(self.db, USER_DESCRIPTOR, limit=2)
        for item in page.items:
            self.assertNotIn("password", item)
            self.assertIn("email", item)


class TestOrdering(PaginationTestCase):
    def test_id_desc(self) -> None:
        self.assertEqual(_walk(self.db, 2, direction="desc"), [7, 6, 5, 4, 3, 2, 1])

    def test_repeated_values_break_ties_on_id(self) -> None:
        self.assertEqual(_walk(self.db, 2, order_by="status"), [2, 5, 7, 1, 3, 6, 4])
        self.assertEqual(
            _walk(self.db, 2, order_by="status", direction="desc"), [4, 6, 3, 1, 7, 5, 2]
        )

    def test_derived_name_sorts_by_first_then_last_with_nulls_last(self) -> None:
        self.assertEqual(_walk(self.db, 3, order_by="name"), [3, 1, 7, 6, 4, 2, 5])

    def test_derived_name_desc_is_exact_reverse(self) -> None:
        self.assertEqual(
            _walk(self.db, 3, order_by="name", direction="desc"), [5, 2, 4, 6, 7, 1, 3]
        )

    def test_pages_concatenate_to_single_page_for_every_limit(self) -> None:
        for order_by in ("id", "status", "first_name", "last_name", "name", "last_login_at"):
            for direction in ("asc", "desc"):
                full = paginate(
                    self.db, USER_DESCRIPTOR, order_by=order_by, direction=direction, limit=100
                )
                expected = [u["id"] for u in full.items]
                for limit in (1, 2, 3, 5):
                    with self.subTest(order_by=order_by, direction=direction, limit=limit):
                        walked = _walk(
                            self.db, limit, order_by=order_by, direction=direction
                        )
                        self.assertEqual(walked, expected)
                        self.assertEqual(len(set(walked)), len(walked))

    def test_deleted_cursor_row_falls_back_to_id_seek(self) -> None:
        first = paginate(self.db, USER_DESCRIPTOR, order_by="status", limit=2)
        self.assertEqual(first.next_cursor, 5)
        self.db.execute(delete(User).where(User.id == 5))
        self.db.commit()

        page = paginate(self.db, USER_DESCRIPTOR, order_by="status", limit=10, cursor=5)
        ids = [u["id"] for u in page.items]
        self.assertTrue(ids)
        self.assertTrue(all(i > 5 for i in ids))


class TestValidation(unittest.TestCase):
    """Bad input is rejected before the session is used."""

    def test_unknown_column_rejected(self) -> None:
        db = MagicMock()
        with self.assertRaises(InvalidSortColumnError) as ctx:
            paginate(db, USER_DESCRIPTOR, order_by="password")
        self.assertIn("Must be one of", ctx.exception.message)
        self.assertIn("email", ctx.exception.allowed)
        db.execute.assert_not_called()

    def test_column_checked_before_direction(self) -> None:
        db = MagicMock()
        with self.assertRaises(InvalidSortColumnError):
            paginate(db, USER_DESCRIPTOR, order_by="bogus", direction="sideways")
        db.execute.assert_not_called()

    def test_bad_direction_rejected(self) -> None:
        db = MagicMock()
        with self.assertRaises(InvalidSortDirectionError):
            paginate(db, USER_DESCRIPTOR, order_by="email", direction="DESC")
        db.execute.assert_not_called()

    def test_whitelist_is_per_entity(self) -> None:
        db = MagicMock()
        with self.assertRaises(InvalidSortColumnError):
            paginate(db, PURCHASE_DESCRIPTOR, order_by="email")
        db.execute.assert_not_called()

    def test_non_positive_or_non_integer_limit_rejected(self) -> None:
        for limit in (0, -1, True, "5", 2.5):
            with self.subTest(limit=limit):
                db = MagicMock()
                with self.assertRaises(InvalidPageLimitError):
                    paginate(db, USER_DESCRIPTOR, limit=limit)
                db.execute.assert_not_called()


if __name__ == "__main__":
    unittest.main()
