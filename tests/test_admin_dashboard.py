from __future__ import annotations

import unittest

from fakes import FakeSupabase, use_fake_session_state
from pure360 import admin_dashboard as admin
from pure360.db import models


class TestAdminData(unittest.TestCase):
    def setUp(self) -> None:
        use_fake_session_state(self)
        self.db = FakeSupabase()

    def test_collections_are_listed_newest_first(self) -> None:
        self.db.add(models.QUOTE_REQUESTS, {"service_type": "removals", "status": "pending"})
        self.db.add(models.QUOTE_REQUESTS, {"service_type": "care", "status": "quoted"})

        df = admin.load_collection(models.QUOTE_REQUESTS, client=self.db)
        self.assertEqual(list(df["service_type"]), ["care", "removals"])

    def test_empty_collection(self) -> None:
        self.assertTrue(admin.load_collection(models.BOOKINGS, client=self.db).empty)
        self.assertTrue(admin.load_workers(client=self.db).empty)

    def test_update_status(self) -> None:
        row = self.db.add(models.BOOKINGS, {"status": "pending"})
        updated = admin.update_status(models.BOOKINGS, row["id"], "confirmed", client=self.db)
        self.assertEqual(updated[0]["status"], "confirmed")

    def test_unknown_status_is_refused(self) -> None:
        row = self.db.add(models.BOOKINGS, {"status": "pending"})
        with self.assertRaises(ValueError):
            admin.update_status(models.BOOKINGS, row["id"], "quoted", client=self.db)
        self.assertEqual(self.db.rows(models.BOOKINGS)[0]["status"], "pending")

    def test_notes_blank_becomes_null(self) -> None:
        row = self.db.add(models.QUOTE_REQUESTS, {"status": "pending", "admin_notes": "call back"})
        admin.update_notes(models.QUOTE_REQUESTS, row["id"], "   ", client=self.db)
        self.assertIsNone(self.db.rows(models.QUOTE_REQUESTS)[0]["admin_notes"])

    def test_workers_are_profiles_with_the_worker_role(self) -> None:
        self.db.add(models.USER_ROLES, {"user_id": "w1", "role": "worker"})
        self.db.add(models.USER_ROLES, {"user_id": "c1", "role": "client"})
        self.db.add(models.PROFILES, {"user_id": "w1", "worker_status": "pending_approval"})
        self.db.add(models.PROFILES, {"user_id": "c1", "worker_status": None})

        workers = admin.load_workers(client=self.db)
        self.assertEqual(list(workers["user_id"]), ["w1"])

        admin.set_worker_status("w1", "approved", client=self.db)
        self.assertEqual(self.db.rows(models.PROFILES)[0]["worker_status"], "approved")
        with self.assertRaises(ValueError):
            admin.set_worker_status("w1", "promoted", client=self.db)

    def test_status_counts(self) -> None:
        for status in ("pending", "pending", "completed"):
            self.db.add(models.BOOKINGS, {"status": status})
        counts = admin.status_counts(admin.load_collection(models.BOOKINGS, client=self.db))
        self.assertEqual(dict(zip(counts["status"], counts["count"])), {"pending": 2, "completed": 1})


if __name__ == "__main__":
    unittest.main()
