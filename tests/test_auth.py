from __future__ import annotations

import unittest

from supabase_auth.errors import AuthError

from fakes import FakeSupabase, use_fake_session_state
from pure360 import auth
from pure360.db import models


class TestPasswordRules(unittest.TestCase):
    def test_strength_levels(self) -> None:
        self.assertEqual(auth.validate_password("").strength_percent, 0)
        self.assertEqual(auth.validate_password("abcdefgh").strength, "weak")
        self.assertEqual(auth.validate_password("Abcdefgh").strength, "fair")
        self.assertEqual(auth.validate_password("Abcdefg1").strength, "good")

        strong = auth.validate_password("Abcdef1!")
        self.assertEqual((strong.strength, strong.strength_percent), ("strong", 100))
        self.assertTrue(strong.is_valid)

    def test_signup_validation(self) -> None:
        errors = auth.validate_signup("not-an-email", "short", " ", "Dlamini", "admin")
        self.assertEqual(set(errors), {"email", "password", "first_name", "role"})
        self.assertEqual(auth.validate_signup("thandi@pure360.co.za", "Abcdef1!", "Thandi", "Dlamini", "worker"), {})


class TestSession(unittest.TestCase):
    def setUp(self) -> None:
        self.session = use_fake_session_state(self)
        self.db = FakeSupabase()

    def test_worker_signup_creates_role_and_pending_profile(self) -> None:
        user = auth.sign_up("sipho@example.com", "Abcdef1!", "Sipho", "Ndlovu", "worker", client=self.db)

        role = self.db.rows(models.USER_ROLES)[0]
        profile = self.db.rows(models.PROFILES)[0]
        self.assertEqual((role["user_id"], role["role"]), (user["id"], "worker"))
        self.assertEqual(profile["worker_status"], "pending_approval")
        self.assertFalse(profile["profile_completed"])
        self.assertEqual(self.session.auth_user, user)

    def test_client_signup_has_no_worker_status(self) -> None:
        auth.sign_up("lerato@example.com", "Abcdef1!", "Lerato", "Mokoena", "client", client=self.db)
        self.assertIsNone(self.db.rows(models.PROFILES)[0]["worker_status"])

    def test_bad_credentials(self) -> None:
        self.db.auth.sign_in_error = AuthError("Invalid login credentials", None)
        with self.assertRaises(auth.AuthFailure):
            auth.sign_in("someone@example.com", "wrong", client=self.db)
        self.assertNotIn("auth_user", self.session)

    def test_load_auth_state(self) -> None:
        self.assertFalse(auth.load_auth_state(client=self.db).is_authenticated)

        self.db.sign_in_as("w1")
        self.db.add(models.USER_ROLES, {"user_id": "w1", "role": "worker"})
        self.db.add(models.PROFILES, {"user_id": "w1", "profile_completed": True, "worker_status": "approved"})

        state = auth.load_auth_state(client=self.db)
        self.assertEqual(state.user["id"], "w1")
        self.assertEqual(state.role, "worker")
        self.assertTrue(state.profile["profile_completed"])
        self.assertEqual(auth.access_token(client=self.db), "token-w1")

    def test_role_lookup_is_cached(self) -> None:
        self.db.add(models.USER_ROLES, {"user_id": "c1", "role": "client"})
        auth.get_user_role("c1", client=self.db)
        auth.get_user_role("c1", client=self.db)
        self.assertEqual(self.db.calls.count((models.USER_ROLES, "select")), 1)

    def test_refresh_profile_refetches(self) -> None:
        self.db.add(models.PROFILES, {"user_id": "w1", "worker_status": "pending_approval"})
        auth.get_profile("w1", client=self.db)
        self.db.rows(models.PROFILES)[0]["worker_status"] = "approved"

        self.assertEqual(auth.get_profile("w1", client=self.db)["worker_status"], "pending_approval")
        self.assertEqual(auth.refresh_profile("w1", client=self.db)["worker_status"], "approved")

    def test_sign_out_clears_session(self) -> None:
        auth.sign_in("someone@example.com", "Abcdef1!", client=self.db)
        self.session.chat_messages = [{"role": "user", "content": "hi"}]
        auth.sign_out(client=self.db)

        self.assertNotIn("auth_user", self.session)
        self.assertNotIn("chat_messages", self.session)
        self.assertIsNone(self.db.auth.get_session())


if __name__ == "__main__":
    unittest.main()
