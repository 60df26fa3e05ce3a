"""Worker complete-profile step: name, located address and a profile picture."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pure360.auth import update_profile
from pure360.db import models
from pure360.db.database import DataAccessError
from pure360.forms import FormState, SubmitResult, submit_once
from pure360.tools import MAX_UPLOAD_BYTES, upload_file


@dataclass
class CompleteProfileState(FormState):
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    picture_name: Optional[str] = None
    picture_bytes: Optional[bytes] = None
    picture_type: Optional[str] = None
    profile_picture_url: Optional[str] = None


def from_profile(profile: Optional[Dict[str, Any]]) -> CompleteProfileState:
    profile = profile or {}
    return CompleteProfileState(
        first_name=profile.get("first_name") or "",
        last_name=profile.get("last_name") or "",
        address=profile.get("address") or "",
        latitude=profile.get("latitude"),
        longitude=profile.get("longitude"),
        profile_picture_url=profile.get("profile_picture_url"),
    )


def validate_complete_profile(state: CompleteProfileState) -> Dict[str, str]:
    errors = {}
    if not state.first_name.strip() or not state.last_name.strip():
        errors["name"] = "Please fill in your first and last name."
    # Coordinates come only from autocomplete; a typed address is stored without them.
    if not state.address.strip():
        errors["address"] = "Please enter your address."
    if state.picture_bytes is None and not state.profile_picture_url:
        errors["picture"] = "Please upload a profile picture."
    elif state.picture_bytes is not None and len(state.picture_bytes) > MAX_UPLOAD_BYTES:
        errors["picture"] = "Please select an image under 5MB"
    state.errors = errors
    return errors


def complete_profile(state: CompleteProfileState, user_id: str, client=None) -> SubmitResult:
    """Upload the picture (if a new one was chosen) and mark the profile complete."""
    if validate_complete_profile(state):
        return SubmitResult(success=False, error="validation")

    def action() -> Dict[str, Any]:
        url = state.profile_picture_url
        if state.picture_bytes is not None:
            url = upload_file(
                models.PROFILE_PICTURES_BUCKET,
                user_id,
                state.picture_name or "picture.jpg",
                state.picture_bytes,
                state.picture_type,
                client=client,
            )
        row = update_profile(
            user_id,
            {
                "first_name": state.first_name.strip(),
                "last_name": state.last_name.strip(),
                "address": state.address,
                "latitude": state.latitude,
                "longitude": state.longitude,
                "profile_picture_url": url,
                "profile_completed": True,
            },
            client=client,
        )
        if row is None:
            raise DataAccessError("Profile not found.")
        return row

    return submit_once(state, action)
