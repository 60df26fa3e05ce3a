from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Dict, Any

from pure360.db import models
from pure360.db.database import insert_row
from pure360.forms import FormState, SubmitResult, submit_once
from pure360.pricing import (
    TIME_SLOTS,
    calculate_hours,
    calculate_price,
    clamp_rooms,
    format_rand,
    get_service,
)


SERVICE_STEP = 1
ROOMS_STEP = 2
SCHEDULE_STEP = 3
CONFIRM_STEP = 4
QUOTE_STEP = 2

SIGN_IN_REQUIRED = "sign_in_required"


@dataclass
class BookingState(FormState):
    step: int = SERVICE_STEP
    service_type: Optional[str] = None
    bedrooms: int = 2
    bathrooms: int = 1
    date: Optional[date] = None
    time: Optional[str] = None
    special_requirements: str = ""

    @property
    def service(self):
        return get_service(self.service_type)

    @property
    def is_quote_based(self) -> bool:
        return bool(self.service and self.service.is_quote_based)

    @property
    def total_steps(self) -> int:
        return 2 if self.is_quote_based else 4

    @property
    def hours(self) -> int:
        return calculate_hours(self.bedrooms, self.bathrooms)

    @property
    def total_price(self) -> int:
        return calculate_price(self.bedrooms, self.bathrooms, self.service_type)

    def to_payload(self, user_id: str) -> Dict[str, Any]:
        return {
            "user_id": user_id,
            "service_type": self.service_type,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "scheduled_date": self.date.isoformat() if self.date else None,
            "scheduled_time": self.time,
            "total_price": self.total_price,
            "status": "pending",
        }


# ----------------- VALIDATORS ------------------------

def is_valid_time_slot(val: Optional[str]) -> bool:
    return val in TIME_SLOTS


def can_proceed(state: BookingState, today: Optional[date] = None) -> bool:
    today = today or date.today()

    if state.step == SERVICE_STEP:
        return state.service is not None
    if state.is_quote_based:
        # Quote step: requirements are optional, a quote can always be sent
        return True
    if state.step == ROOMS_STEP:
        return state.bedrooms >= 1 and state.bathrooms >= 1
    if state.step == SCHEDULE_STEP:
        return state.date is not None and state.date >= today and is_valid_time_slot(state.time)
    return state.step == CONFIRM_STEP


# ----------------- TRANSITIONS ------------------------

def select_service(state: BookingState, service_type: str) -> BookingState:
    if get_service(service_type) is None:
        state.errors["service_type"] = "Please choose a service."
        return state
    state.errors.pop("service_type", None)
    state.service_type = service_type
    return state


def set_rooms(state: BookingState, bedrooms: int, bathrooms: int) -> BookingState:
    state.bedrooms = clamp_rooms(bedrooms)
    state.bathrooms = clamp_rooms(bathrooms)
    return state


def set_schedule(state: BookingState, day: Optional[date], slot: Optional[str], today: Optional[date] = None) -> BookingState:
    today = today or date.today()
    state.errors.pop("date", None)
    state.errors.pop("time", None)

    if day is not None and day < today:
        state.errors["date"] = "Please choose an upcoming date."
    else:
        state.date = day
    if slot is not None and not is_valid_time_slot(slot):
        state.errors["time"] = "Please choose one of the available time slots."
    else:
        state.time = slot
    return state


def next_step(state: BookingState, today: Optional[date] = None) -> bool:
    if not can_proceed(state, today) or state.step >= state.total_steps:
        return False
    state.step += 1
    return True


def previous_step(state: BookingState) -> bool:
    if state.step <= SERVICE_STEP:
        return False
    state.step -= 1
    return True


# ----------------- SUBMISSION ------------------------

def submit_booking(state: BookingState, user: Optional[Dict[str, Any]], client=None) -> SubmitResult:
    """Insert the single bookings row. Nothing is written before this point."""
    if not user:
        return SubmitResult(success=False, error=SIGN_IN_REQUIRED)
    if state.date is None or state.time is None:
        return SubmitResult(success=False, error="Please choose a date and time.")

    return submit_once(
        state, lambda: insert_row(models.BOOKINGS, state.to_payload(user["id"]), client=client)
    )


def generate_confirmation_text(state: BookingState) -> str:
    service = state.service
    return (
        f"- **Service:** {service.name if service else state.service_type}\n"
        f"- **Rooms:** {state.bedrooms} bedroom(s), {state.bathrooms} bathroom(s)\n"
        f"- **Estimated time:** {state.hours} hours\n"
        f"- **Date:** {state.date}\n"
        f"- **Time:** {state.time}\n"
        f"- **Total:** {format_rand(state.total_price)}"
    )
