from __future__ import annotations

import unittest
from datetime import date, timedelta

from fakes import FakeSupabase, use_fake_session_state
from pure360.booking_flow import BookingState, submit_booking
from pure360.db import models
from pure360.db.database import DataAccessError
from pure360.forms import (
    GENERIC_FAILURE,
    FormState,
    form_state,
    queue_toast,
    require,
    reset_form,
    submit_once,
)


class TestSubmitOnce(unittest.TestCase):
    def setUp(self) -> None:
        self.session = use_fake_session_state(self)

    def test_success_marks_form_submitted(self) -> None:
        state = FormState()
        result = submit_once(state, lambda: {"id": "1"})
        self.assertTrue(result.success)
        self.assertEqual(result.record, {"id": "1"})
        self.assertTrue(state.submitted)
        self.assertFalse(state.submitting)

    def test_failure_keeps_form_and_reenables_submit(self) -> None:
        state = FormState()

        def boom():
            raise DataAccessError("permission denied")

        result = submit_once(state, boom)
        self.assertFalse(result.success)
        self.assertEqual(result.error, "permission denied")
        self.assertEqual(state.last_error, GENERIC_FAILURE)
        self.assertFalse(state.submitting)
        self.assertFalse(state.submitted)

    def test_second_click_while_in_flight_is_dropped(self) -> None:
        db = FakeSupabase()
        state = BookingState(
            service_type="indoor_cleaning",
            date=date.today() + timedelta(days=2),
            time="09:00",
        )
        nested = []

        def click_again(table, values):
            if table == models.BOOKINGS:
                nested.append(submit_booking(state, {"id": "u1"}, client=db))

        db.on_insert = click_again
        first = submit_booking(state, {"id": "u1"}, client=db)

        self.assertTrue(first.success)
        self.assertTrue(nested[0].skipped)
        self.assertEqual(len(db.rows(models.BOOKINGS)), 1)

    def test_succeeded_form_refuses_another_run(self) -> None:
        state = FormState()
        calls = []
        submit_once(state, lambda: calls.append(1) or {"id": "1"})
        second = submit_once(state, lambda: calls.append(1) or {"id": "2"})

        self.assertTrue(second.skipped)
        self.assertTrue(state.locked)
        self.assertEqual(len(calls), 1)

    def test_failed_form_stays_unlocked(self) -> None:
        state = FormState()

        def boom():
            raise DataAccessError("timeout")

        submit_once(state, boom)
        self.assertFalse(state.locked)
        self.assertTrue(submit_once(state, lambda: {"id": "1"}).success)

    def test_form_state_is_kept_per_session_until_reset(self) -> None:
        first = form_state("quote", FormState)
        self.assertIs(form_state("quote", FormState), first)
        reset_form("quote")
        self.assertIsNot(form_state("quote", FormState), first)

    def test_queue_toast(self) -> None:
        queue_toast("Booked")
        self.assertEqual(self.session.pending_toasts, [("Booked", "✅")])

    def test_require_flags_blank_fields(self) -> None:
        errors = require({"a": "  ", "b": "x", "c": None}, {"a": "A", "b": "B", "c": "C"})
        self.assertEqual(errors, {"a": "A", "c": "C"})


if __name__ == "__main__":
    unittest.main()
