"""General enquiries and worker applications: public forms, no sign-in needed."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional, Tuple

from pure360.db import models
from pure360.db.database import insert_row
from pure360.forms import FormState, SubmitResult, submit_once
from pure360.tools import MAX_UPLOAD_BYTES, upload_file

ENQUIRY_SERVICES = {
    "home_cleaning": "Home Cleaning",
    "deep_moving_cleaning": "Deep & Moving Cleaning",
    "outdoor_garden": "Outdoor & Garden Services",
    "airbnb_shortstay": "Airbnb & Short-Stay Cleaning",
    "rubble_removal": "Rubble & Furniture Removal",
    "care_services": "Care Services",
    "bin_cleaning": "Bin Cleaning",
}

WORK_TYPES = {
    "cleaning": "Cleaning",
    "gardening": "Gardening",
    "care": "Care",
    "removals": "Removals",
    "other": "Other",
}

EXPERIENCE_OPTIONS = {
    "0-1": "Less than 1 year",
    "1-2": "1-2 years",
    "3-5": "3-5 years",
    "5+": "5+ years",
}

DOCUMENT_FIELDS = ("cv_url", "id_document_url", "photo_url")

# (filename, bytes, content type)
Upload = Tuple[str, bytes, Optional[str]]


@dataclass
class EnquiryState(FormState):
    full_name: str = ""
    contact_number: str = ""
    area_suburb: str = ""
    service_required: str = ""
    preferred_date: Optional[date] = None
    additional_notes: str = ""


@dataclass
class WorkerApplicationState(FormState):
    full_name: str = ""
    contact_number: str = ""
    area: str = ""
    work_type: str = ""
    years_experience: str = ""
    additional_notes: str = ""
    documents: Dict[str, Upload] = field(default_factory=dict)


def _check_contact(name: str, number: str, area: str, area_field: str, errors: Dict[str, str]) -> None:
    name, number, area = name.strip(), number.strip(), area.strip()
    if not 2 <= len(name) <= 100:
        errors["full_name"] = "Please enter your full name"
    if not 10 <= len(number) <= 15:
        errors["contact_number"] = "Please enter a valid contact number"
    if not 2 <= len(area) <= 100:
        errors[area_field] = "Please enter your area or suburb"


def validate_enquiry(state: EnquiryState) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    _check_contact(state.full_name, state.contact_number, state.area_suburb, "area_suburb", errors)
    if state.service_required not in ENQUIRY_SERVICES:
        errors["service_required"] = "Please select a service"
    if len(state.additional_notes) > 500:
        errors["additional_notes"] = "Notes must be 500 characters or fewer"
    state.errors = errors
    return errors


def validate_application(state: WorkerApplicationState) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    _check_contact(state.full_name, state.contact_number, state.area, "area", errors)
    if state.work_type not in WORK_TYPES:
        errors["work_type"] = "Please select a type of work"
    if state.years_experience and state.years_experience not in EXPERIENCE_OPTIONS:
        errors["years_experience"] = "Please select your experience"
    if len(state.additional_notes) > 500:
        errors["additional_notes"] = "Notes must be 500 characters or fewer"
    for name, (_, data, _) in state.documents.items():
        if len(data) > MAX_UPLOAD_BYTES:
            errors[name] = "Please select a file under 5MB"
    state.errors = errors
    return errors


def submit_enquiry(state: EnquiryState, client=None) -> SubmitResult:
    if validate_enquiry(state):
        return SubmitResult(success=False, error="validation")

    payload = {
        "full_name": state.full_name.strip(),
        "contact_number": state.contact_number.strip(),
        "area_suburb": state.area_suburb.strip(),
        "service_required": state.service_required,
        "preferred_date": state.preferred_date.isoformat() if state.preferred_date else None,
        "additional_notes": state.additional_notes.strip() or None,
        "status": "pending",
    }
    return submit_once(state, lambda: insert_row(models.ENQUIRIES, payload, client=client))


def submit_application(state: WorkerApplicationState, client=None) -> SubmitResult:
    if validate_application(state):
        return SubmitResult(success=False, error="validation")

    def action() -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "full_name": state.full_name.strip(),
            "contact_number": state.contact_number.strip(),
            "area": state.area.strip(),
            "work_type": state.work_type,
            "years_experience": state.years_experience or None,
            "additional_notes": state.additional_notes.strip() or None,
            "status": "pending",
        }
        folder = state.contact_number.strip().replace(" ", "")
        for name in DOCUMENT_FIELDS:
            if name in state.documents:
                filename, data, content_type = state.documents[name]
                payload[name] = upload_file(
                    models.WORKER_DOCUMENTS_BUCKET, folder, filename, data, content_type, client=client
                )
        return insert_row(models.WORKER_APPLICATIONS, payload, client=client)

    return submit_once(state, action)
