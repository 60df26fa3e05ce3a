from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging
import re

import streamlit as st
from email_validator import validate_email as _validate_email, EmailNotValidError
from supabase_auth.errors import AuthError

from pure360.db import models
from pure360.db.database import (
    cached_query,
    get_supabase_client,
    insert_row,
    invalidate,
    select_one,
    update_rows,
)
from pure360.routing import AuthState

logger = logging.getLogger(__name__)


class AuthFailure(Exception):
    pass


# ----------------- PASSWORD RULES ------------------------

SPECIAL_CHARS = re.compile(r'[!@#$%^&*(),.?":{}|<>]')


@dataclass
class PasswordValidation:
    is_valid: bool
    has_min_length: bool
    has_uppercase: bool
    has_number: bool
    has_special_char: bool
    strength: str
    strength_percent: int


def validate_password(password: str) -> PasswordValidation:
    has_min_length = len(password) >= 8
    has_uppercase = re.search(r"[A-Z]", password) is not None
    has_number = re.search(r"[0-9]", password) is not None
    has_special_char = SPECIAL_CHARS.search(password) is not None

    score = sum([has_min_length, has_uppercase, has_number, has_special_char])
    strength, percent = {
        4: ("strong", 100),
        3: ("good", 75),
        2: ("fair", 50),
        1: ("weak", 25),
    }.get(score, ("weak", 0))

    return PasswordValidation(
        is_valid=score == 4,
        has_min_length=has_min_length,
        has_uppercase=has_uppercase,
        has_number=has_number,
        has_special_char=has_special_char,
        strength=strength,
        strength_percent=percent,
    )


def is_valid_email(email: str) -> bool:
    try:
        _validate_email(email, check_deliverability=False)
        return True
    except EmailNotValidError:
        return False


def validate_signup(email: str, password: str, first_name: str, last_name: str, role: str) -> Dict[str, str]:
    errors = {}
    if not is_valid_email(email or ""):
        errors["email"] = "Please enter a valid email address."
    if not validate_password(password or "").is_valid:
        errors["password"] = (
            "Password needs at least 8 characters, an uppercase letter, a number and a special character."
        )
    if not (first_name or "").strip():
        errors["first_name"] = "First name is required."
    if not (last_name or "").strip():
        errors["last_name"] = "Last name is required."
    if role not in models.SIGNUP_ROLES:
        errors["role"] = "Please choose whether you are booking services or working with us."
    return errors


# ----------------- SESSION ------------------------

def _user_dict(user: Any) -> Dict[str, Any]:
    return {"id": str(user.id), "email": getattr(user, "email", None)}


def current_user(client=None) -> Optional[Dict[str, Any]]:
    if st.session_state.get("auth_user"):
        return st.session_state.auth_user

    supabase = client or get_supabase_client()
    try:
        session = supabase.auth.get_session()
    except AuthError as e:
        logger.warning("Session lookup failed: %s", e)
        return None
    if session is None or session.user is None:
        return None

    st.session_state.auth_user = _user_dict(session.user)
    return st.session_state.auth_user


def access_token(client=None) -> Optional[str]:
    supabase = client or get_supabase_client()
    try:
        session = supabase.auth.get_session()
    except AuthError:
        return None
    return session.access_token if session else None


def sign_in(email: str, password: str, client=None) -> Dict[str, Any]:
    supabase = client or get_supabase_client()
    try:
        response = supabase.auth.sign_in_with_password({"email": email.strip(), "password": password})
    except AuthError as e:
        logger.info("Sign-in rejected for %s: %s", email, e)
        raise AuthFailure("Invalid email or password.") from e

    if response.user is None:
        raise AuthFailure("Invalid email or password.")
    st.session_state.auth_user = _user_dict(response.user)
    return st.session_state.auth_user


def sign_up(email: str, password: str, first_name: str, last_name: str, role: str, client=None) -> Dict[str, Any]:
    """Create the account, its role row and an empty profile (workers start pending approval)."""
    supabase = client or get_supabase_client()
    try:
        response = supabase.auth.sign_up(
            {
                "email": email.strip(),
                "password": password,
                "options": {"data": {"first_name": first_name.strip(), "last_name": last_name.strip()}},
            }
        )
    except AuthError as e:
        logger.warning("Sign-up failed for %s: %s", email, e)
        raise AuthFailure(str(e)) from e

    if response.user is None:
        raise AuthFailure("Sign-up failed. Please try again.")

    user = _user_dict(response.user)
    insert_row(models.USER_ROLES, {"user_id": user["id"], "role": role}, client=supabase)
    insert_row(
        models.PROFILES,
        {
            "user_id": user["id"],
            "first_name": first_name.strip(),
            "last_name": last_name.strip(),
            "worker_status": "pending_approval" if role == "worker" else None,
            "profile_completed": False,
        },
        client=supabase,
    )
    st.session_state.auth_user = user
    return user


def sign_out(client=None) -> None:
    supabase = client or get_supabase_client()
    try:
        supabase.auth.sign_out()
    except AuthError as e:
        logger.warning("Sign-out failed: %s", e)
    for key in ("auth_user", "query_cache", "chat_messages"):
        st.session_state.pop(key, None)


# ----------------- ROLE & PROFILE ------------------------

def get_user_role(user_id: str, client=None) -> Optional[str]:
    def load():
        row = select_one(models.USER_ROLES, "user_id", user_id, client=client)
        return row["role"] if row else None

    return cached_query(models.USER_ROLES, user_id, load)


def get_profile(user_id: str, client=None) -> Optional[Dict[str, Any]]:
    return cached_query(
        models.PROFILES, user_id, lambda: select_one(models.PROFILES, "user_id", user_id, client=client)
    )


def refresh_profile(user_id: str, client=None) -> Optional[Dict[str, Any]]:
    invalidate(models.PROFILES)
    return get_profile(user_id, client=client)


def update_profile(user_id: str, values: Dict[str, Any], client=None) -> Optional[Dict[str, Any]]:
    rows = update_rows(models.PROFILES, values, "user_id", user_id, client=client)
    return rows[0] if rows else None


def load_auth_state(client=None) -> AuthState:
    user = current_user(client=client)
    if user is None:
        return AuthState()
    return AuthState(
        user=user,
        role=get_user_role(user["id"], client=client),
        profile=get_profile(user["id"], client=client),
    )
