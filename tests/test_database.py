from __future__ import annotations

import unittest

from fakes import FakeSupabase, use_fake_session_state
from pure360.db import models
from pure360.db.database import (
    DataAccessError,
    cached_query,
    insert_row,
    select_one,
    select_rows,
    update_rows,
)


class TestDatabase(unittest.TestCase):
    def setUp(self) -> None:
        self.session = use_fake_session_state(self)
        self.db = FakeSupabase()

    def test_select_rows_is_newest_first_and_filters(self) -> None:
        self.db.add(models.BOOKINGS, {"user_id": "a", "status": "pending"})
        self.db.add(models.BOOKINGS, {"user_id": "b", "status": "confirmed"})
        self.db.add(models.BOOKINGS, {"user_id": "a", "status": "completed"})

        rows = select_rows(models.BOOKINGS, client=self.db)
        self.assertEqual([r["status"] for r in rows], ["completed", "confirmed", "pending"])

        rows = select_rows(models.BOOKINGS, {"user_id": "a"}, client=self.db)
        self.assertEqual(len(rows), 2)

        rows = select_rows(models.BOOKINGS, {"status": ["pending", "confirmed"]}, client=self.db)
        self.assertEqual({r["user_id"] for r in rows}, {"a", "b"})

    def test_select_one_returns_none_when_missing(self) -> None:
        self.assertIsNone(select_one(models.PROFILES, "user_id", "ghost", client=self.db))

    def test_backend_error_becomes_data_access_error(self) -> None:
        self.db.failures.add((models.BOOKINGS, "insert"))
        with self.assertRaises(DataAccessError):
            insert_row(models.BOOKINGS, {"status": "pending"}, client=self.db)

    def test_network_failure_becomes_data_access_error(self) -> None:
        self.db.network_down = True
        with self.assertRaises(DataAccessError):
            select_rows(models.BOOKINGS, client=self.db)
        with self.assertRaises(DataAccessError):
            select_one(models.PROFILES, "user_id", "u1", client=self.db)
        with self.assertRaises(DataAccessError):
            insert_row(models.BOOKINGS, {"status": "pending"}, client=self.db)
        with self.assertRaises(DataAccessError):
            update_rows(models.BOOKINGS, {"status": "confirmed"}, "id", "b1", client=self.db)

    def test_insert_without_returned_row_is_an_error(self) -> None:
        self.db.silent_tables.add(models.ENQUIRIES)
        with self.assertRaises(DataAccessError):
            insert_row(models.ENQUIRIES, {"full_name": "Thandi"}, client=self.db)

    def test_mutation_invalidates_cached_reads(self) -> None:
        def load():
            return select_rows(models.BOOKINGS, {"user_id": "u1"}, client=self.db)

        self.assertEqual(cached_query(models.BOOKINGS, "u1", load), [])
        insert_row(models.BOOKINGS, {"user_id": "u1", "status": "pending"}, client=self.db)
        self.assertEqual(len(cached_query(models.BOOKINGS, "u1", load)), 1)

    def test_cached_query_reuses_result_until_invalidated(self) -> None:
        calls = []

        def load():
            calls.append(1)
            return ["row"]

        cached_query(models.PROFILES, "u1", load)
        cached_query(models.PROFILES, "u1", load)
        self.assertEqual(len(calls), 1)

        self.db.add(models.PROFILES, {"user_id": "u1"})
        update_rows(models.PROFILES, {"first_name": "Lerato"}, "user_id", "u1", client=self.db)
        cached_query(models.PROFILES, "u1", load)
        self.assertEqual(len(calls), 2)

    def test_update_is_last_write_wins(self) -> None:
        row = self.db.add(models.BOOKINGS, {"status": "pending"})
        update_rows(models.BOOKINGS, {"status": "confirmed"}, "id", row["id"], client=self.db)
        update_rows(models.BOOKINGS, {"status": "cancelled"}, "id", row["id"], client=self.db)
        self.assertEqual(select_one(models.BOOKINGS, "id", row["id"], client=self.db)["status"], "cancelled")


if __name__ == "__main__":
    unittest.main()
