"""Quote request forms: removals, care, and the quote-based cleaning services.

Each submission inserts one quote_requests row with status "pending".
There is no deduplication key, so sending the same form twice (after the
first request finished) creates two requests; the team handles that by hand.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pure360.db import models
from pure360.db.database import insert_row
from pure360.forms import FormState, SubmitResult, require, submit_once
from pure360.pricing import get_service

SIGN_IN_REQUIRED = "sign_in_required"

CARE_TYPES = {
    "elderly_companion": ("Elderly Companion", "Companionship and daily assistance"),
    "nursing": ("Nursing Care", "Professional medical care at home"),
}

FREQUENCIES = [
    "Daily",
    "Weekdays only",
    "Weekends only",
    "2-3 times per week",
    "Once a week",
    "Live-in",
]


@dataclass
class RemovalsQuoteState(FormState):
    item_description: str = ""
    pickup_suburb: str = ""
    dropoff_suburb: str = ""


@dataclass
class CareQuoteState(FormState):
    care_type: str = ""
    frequency: str = ""
    special_requirements: str = ""


@dataclass
class CleaningQuoteState(FormState):
    service_type: str = ""
    special_requirements: str = ""


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ----------------- VALIDATION ------------------------

def validate_removals(state: RemovalsQuoteState) -> Dict[str, str]:
    state.errors = require(
        vars(state),
        {
            "item_description": "Please describe what needs to be moved.",
            "pickup_suburb": "Pickup suburb is required.",
            "dropoff_suburb": "Drop-off suburb is required.",
        },
    )
    return state.errors


def validate_care(state: CareQuoteState) -> Dict[str, str]:
    errors = {}
    if state.care_type not in CARE_TYPES:
        errors["care_type"] = "Please select the type of care needed."
    if state.frequency not in FREQUENCIES:
        errors["frequency"] = "Please select how often care is needed."
    state.errors = errors
    return errors


def validate_cleaning_quote(state: CleaningQuoteState) -> Dict[str, str]:
    service = get_service(state.service_type)
    state.errors = {} if service and service.is_quote_based else {"service_type": "Please choose a service."}
    return state.errors


# ----------------- PAYLOADS ------------------------

def removals_payload(state: RemovalsQuoteState, user_id: str) -> Dict[str, Any]:
    return {
        "user_id": user_id,
        "service_type": "removals",
        "item_description": state.item_description.strip(),
        "pickup_suburb": state.pickup_suburb.strip(),
        "dropoff_suburb": state.dropoff_suburb.strip(),
        "status": "pending",
    }


def care_payload(state: CareQuoteState, user_id: str) -> Dict[str, Any]:
    return {
        "user_id": user_id,
        "service_type": "care",
        "care_type": state.care_type,
        "frequency": state.frequency,
        "special_requirements": _blank_to_none(state.special_requirements),
        "status": "pending",
    }


def cleaning_quote_payload(state: CleaningQuoteState, user_id: str) -> Dict[str, Any]:
    return {
        "user_id": user_id,
        "service_type": state.service_type,
        "special_requirements": _blank_to_none(state.special_requirements),
        "status": "pending",
    }


# ----------------- SUBMISSION ------------------------

_FORMS = {
    RemovalsQuoteState: (validate_removals, removals_payload),
    CareQuoteState: (validate_care, care_payload),
    CleaningQuoteState: (validate_cleaning_quote, cleaning_quote_payload),
}


def submit_quote(state: FormState, user: Optional[Dict[str, Any]], client=None) -> SubmitResult:
    validate, payload = _FORMS[type(state)]
    if validate(state):
        return SubmitResult(success=False, error="validation")
    if not user:
        return SubmitResult(success=False, error=SIGN_IN_REQUIRED)

    return submit_once(
        state, lambda: insert_row(models.QUOTE_REQUESTS, payload(state, user["id"]), client=client)
    )
