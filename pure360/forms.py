"""Shared form state: field errors, the in-flight flag and toast messages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional
import logging

import streamlit as st

from pure360.db.database import DataAccessError

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Something went wrong. Please try again."


@dataclass
class FormState:
    errors: Dict[str, str] = field(default_factory=dict)
    submitting: bool = False
    submitted: bool = False
    last_error: Optional[str] = None

    @property
    def locked(self) -> bool:
        """Submit controls stay disabled while a request is in flight or once it succeeded."""
        return self.submitting or self.submitted


@dataclass
class SubmitResult:
    success: bool
    record: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    skipped: bool = False


def submit_once(state: FormState, action: Callable[[], Dict[str, Any]]) -> SubmitResult:
    """
    Run `action` unless this form is in flight or has already succeeded.

    Submit buttons render with disabled=state.locked. A second click that
    still reaches here, during the request or on the rerun after it, is
    dropped instead of inserting a second record. A failed submission
    leaves the form unlocked so it can be retried.
    """
    if state.locked:
        return SubmitResult(success=False, skipped=True)

    state.submitting = True
    state.last_error = None
    try:
        record = action()
    except DataAccessError as e:
        logger.error("Submission failed: %s", e)
        state.last_error = GENERIC_FAILURE
        return SubmitResult(success=False, error=str(e))
    finally:
        state.submitting = False

    state.submitted = True
    return SubmitResult(success=True, record=record)


def form_state(key: str, factory: Callable[[], Any]) -> Any:
    """Per-session form state container, created on first use."""
    if key not in st.session_state:
        st.session_state[key] = factory()
    return st.session_state[key]


def reset_form(key: str) -> None:
    if key in st.session_state:
        del st.session_state[key]


# ----------------- TOASTS ------------------------

def queue_toast(message: str, icon: str = "✅") -> None:
    """Toast shown after the next rerun (survives st.rerun / navigation)."""
    st.session_state.setdefault("pending_toasts", []).append((message, icon))


def flush_toasts() -> None:
    for message, icon in st.session_state.pop("pending_toasts", []):
        st.toast(message, icon=icon)


def show_field_errors(errors: Dict[str, str]) -> None:
    for msg in errors.values():
        st.error(msg)


def require(values: Dict[str, Any], messages: Dict[str, str]) -> Dict[str, str]:
    """Field-level required check: {field: message} for every blank field."""
    errors = {}
    for name, message in messages.items():
        value = values.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors[name] = message
    return errors
