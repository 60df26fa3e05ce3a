from __future__ import annotations

import unittest
from datetime import date, timedelta

from fakes import FakeSupabase, use_fake_session_state
from pure360 import booking_flow as bf
from pure360.db import models

TODAY = date(2026, 3, 10)


class TestBookingWizard(unittest.TestCase):
    def setUp(self) -> None:
        use_fake_session_state(self)
        self.db = FakeSupabase()

    def _ready_state(self) -> bf.BookingState:
        state = bf.BookingState()
        bf.select_service(state, "indoor_cleaning")
        bf.set_rooms(state, 4, 3)
        bf.set_schedule(state, TODAY + timedelta(days=1), "10:00", today=TODAY)
        return state

    def test_cannot_leave_first_step_without_a_service(self) -> None:
        state = bf.BookingState()
        self.assertFalse(bf.can_proceed(state, TODAY))
        self.assertFalse(bf.next_step(state, TODAY))

        bf.select_service(state, "not-a-service")
        self.assertIn("service_type", state.errors)
        self.assertIsNone(state.service_type)

    def test_instant_booking_walks_four_steps(self) -> None:
        state = bf.BookingState()
        bf.select_service(state, "deep_clean")
        self.assertEqual(state.total_steps, 4)
        self.assertTrue(bf.next_step(state, TODAY))
        self.assertEqual(state.step, bf.ROOMS_STEP)

        bf.set_rooms(state, 3, 2)
        self.assertTrue(bf.next_step(state, TODAY))
        self.assertEqual(state.step, bf.SCHEDULE_STEP)

        # No date picked yet
        self.assertFalse(bf.next_step(state, TODAY))
        bf.set_schedule(state, TODAY, "08:00", today=TODAY)
        self.assertTrue(bf.next_step(state, TODAY))
        self.assertEqual(state.step, bf.CONFIRM_STEP)
        self.assertFalse(bf.next_step(state, TODAY))

        self.assertTrue(bf.previous_step(state))
        self.assertEqual(state.step, bf.SCHEDULE_STEP)

    def test_quote_based_service_has_two_steps(self) -> None:
        state = bf.BookingState()
        bf.select_service(state, "gardening")
        self.assertTrue(state.is_quote_based)
        self.assertEqual(state.total_steps, 2)
        self.assertTrue(bf.next_step(state, TODAY))
        self.assertEqual(state.step, bf.QUOTE_STEP)
        self.assertFalse(bf.next_step(state, TODAY))

    def test_past_dates_and_unknown_slots_are_rejected(self) -> None:
        state = bf.BookingState(service_type="indoor_cleaning", step=bf.SCHEDULE_STEP)
        bf.set_schedule(state, TODAY - timedelta(days=1), "07:30", today=TODAY)
        self.assertIn("date", state.errors)
        self.assertIn("time", state.errors)
        self.assertIsNone(state.date)
        self.assertIsNone(state.time)
        self.assertFalse(bf.can_proceed(state, TODAY))

    def test_rooms_are_clamped(self) -> None:
        state = bf.set_rooms(bf.BookingState(), 0, 15)
        self.assertEqual((state.bedrooms, state.bathrooms), (1, 10))

    def test_price_follows_room_counts(self) -> None:
        state = self._ready_state()
        self.assertEqual(state.hours, 7)
        self.assertEqual(state.total_price, 620)
        self.assertIn("R620", bf.generate_confirmation_text(state))

    def test_submit_requires_sign_in_and_writes_nothing(self) -> None:
        result = bf.submit_booking(self._ready_state(), None, client=self.db)
        self.assertFalse(result.success)
        self.assertEqual(result.error, bf.SIGN_IN_REQUIRED)
        self.assertEqual(self.db.rows(models.BOOKINGS), [])

    def test_submit_inserts_one_pending_booking(self) -> None:
        state = self._ready_state()
        result = bf.submit_booking(state, {"id": "u1"}, client=self.db)

        self.assertTrue(result.success)
        rows = self.db.rows(models.BOOKINGS)
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["status"], "pending")
        self.assertEqual(rows[0]["user_id"], "u1")
        self.assertEqual(rows[0]["total_price"], 620)
        self.assertEqual(rows[0]["scheduled_date"], "2026-03-11")
        self.assertEqual(rows[0]["scheduled_time"], "10:00")

    def test_failed_submit_leaves_wizard_in_place(self) -> None:
        self.db.failures.add((models.BOOKINGS, "insert"))
        state = self._ready_state()
        state.step = bf.CONFIRM_STEP
        result = bf.submit_booking(state, {"id": "u1"}, client=self.db)

        self.assertFalse(result.success)
        self.assertEqual(state.step, bf.CONFIRM_STEP)
        self.assertFalse(state.submitting)
        self.assertIsNotNone(state.last_error)


if __name__ == "__main__":
    unittest.main()
