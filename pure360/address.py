from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import json
import logging
import re

import requests

logger = logging.getLogger(__name__)

PLACES_AUTOCOMPLETE_URL = "https://maps.googleapis.com/maps/api/place/autocomplete/json"
PLACES_DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
MAPS_KEY_FUNCTION = "get-maps-api-key"
COUNTRY = "za"
REQUEST_TIMEOUT = 10

SA_PROVINCES = [
    "Eastern Cape",
    "Free State",
    "Gauteng",
    "KwaZulu-Natal",
    "Limpopo",
    "Mpumalanga",
    "Northern Cape",
    "North West",
    "Western Cape",
]

MIN_MANUAL_LENGTH = 5
MIN_MANUAL_WORDS = 2
UNSAFE_CHARS = set("<>{};`$\\")


class MapsUnavailable(Exception):
    pass


@dataclass
class SAAddress:
    street_number: str = ""
    street_name: str = ""
    suburb: str = ""
    city: str = ""
    province: str = ""
    postal_code: str = ""
    full_address: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def street(self) -> str:
        return f"{self.street_number} {self.street_name}".strip()


@dataclass
class AddressCheck:
    is_valid: bool
    hints: List[str] = field(default_factory=list)


# ----------------- MANUAL ENTRY ------------------------

def validate_manual_address(text: str) -> AddressCheck:
    """
    Heuristic check for a free-text address typed without autocomplete.
    Advisory only: the hints are shown under the field, submission is never blocked.
    """
    value = (text or "").strip()
    hints = []

    if len(value) < MIN_MANUAL_LENGTH:
        hints.append("Address looks too short.")
    if not re.search(r"\d", value):
        hints.append("Include a street or unit number.")
    if not re.search(r"[A-Za-z]", value):
        hints.append("Include the street name.")
    if len(value.split()) < MIN_MANUAL_WORDS:
        hints.append("Include both the number and the street name.")
    if any(ch in UNSAFE_CHARS for ch in value):
        hints.append("Remove special characters such as < > { } ; ` $ \\.")

    return AddressCheck(is_valid=not hints, hints=hints)


def validate_sa_address(address: Dict[str, Any]) -> Dict[str, str]:
    errors = {}
    if not (address.get("unit") or "").strip():
        errors["unit"] = "Unit/Flat number is required (even for houses, use '1')"
    if len((address.get("street") or "").strip()) < 3:
        errors["street"] = "Please provide a valid street name and number"
    if len((address.get("suburb") or "").strip()) < 2:
        errors["suburb"] = "Suburb is required for our workers to find you"
    if len((address.get("city") or "").strip()) < 2:
        errors["city"] = "City is required"
    if address.get("province") not in SA_PROVINCES:
        errors["province"] = "Please select a valid South African province"
    if not re.fullmatch(r"\d{4}", address.get("postal_code") or ""):
        errors["postal_code"] = "SA Postal codes must be 4 digits"
    return errors


def clean_postal_code(value: str) -> str:
    return re.sub(r"\D", "", value or "")[:4]


def build_full_address(address: Dict[str, Any]) -> str:
    parts = [
        f"Unit {address['unit']}" if address.get("unit") else None,
        address.get("complex"),
        address.get("street"),
        address.get("suburb"),
        address.get("city"),
        address.get("province"),
        address.get("postal_code"),
    ]
    return ", ".join(p for p in parts if p)


def parse_existing_address(address: str) -> Dict[str, str]:
    parts = [p.strip() for p in address.split(",")]
    if len(parts) >= 4:
        return {
            "street": parts[0],
            "suburb": parts[1],
            "city": parts[2],
            "province": parts[3],
            "postal_code": parts[4] if len(parts) > 4 else "",
        }
    return {"street": address}


# ----------------- AUTOCOMPLETE ------------------------

def map_place_to_sa(place: Dict[str, Any]) -> SAAddress:
    components = place.get("address_components") or []

    def component(types: List[str]) -> str:
        for c in components:
            if any(t in c.get("types", []) for t in types):
                return c.get("long_name", "")
        return ""

    location = (place.get("geometry") or {}).get("location") or {}
    return SAAddress(
        street_number=component(["street_number"]),
        street_name=component(["route"]),
        suburb=component(["sublocality_level_1", "sublocality", "neighborhood"]),
        city=component(["locality"]),
        province=component(["administrative_area_level_1"]),
        postal_code=component(["postal_code"]),
        full_address=place.get("formatted_address", ""),
        latitude=location.get("lat"),
        longitude=location.get("lng"),
    )


def fetch_maps_api_key(client, fallback: str = "") -> Optional[str]:
    """Ask the backend function for the browser maps key; no session or no key means manual entry."""
    try:
        if client.auth.get_session() is None:
            return fallback or None
        data = client.functions.invoke(MAPS_KEY_FUNCTION)
        if isinstance(data, (bytes, str)):
            data = json.loads(data)
        return (data or {}).get("apiKey") or fallback or None
    except Exception as e:
        logger.warning("Address search unavailable: %s", e)
        return fallback or None


def _get_places(url: str, params: Dict[str, Any]) -> Dict[str, Any]:
    try:
        response = requests.get(url, params=params, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as e:
        raise MapsUnavailable(str(e)) from e

    status = payload.get("status")
    if status not in ("OK", "ZERO_RESULTS"):
        raise MapsUnavailable(payload.get("error_message") or status or "unknown maps error")
    return payload


def autocomplete(query: str, api_key: str) -> List[Dict[str, str]]:
    if len((query or "").strip()) < 3:
        return []
    payload = _get_places(
        PLACES_AUTOCOMPLETE_URL,
        {"input": query, "types": "address", "components": f"country:{COUNTRY}", "key": api_key},
    )
    return [
        {"description": p["description"], "place_id": p["place_id"]}
        for p in payload.get("predictions", [])
    ]


def place_details(place_id: str, api_key: str) -> SAAddress:
    payload = _get_places(
        PLACES_DETAILS_URL,
        {
            "place_id": place_id,
            "fields": "address_component,formatted_address,geometry",
            "key": api_key,
        },
    )
    return map_place_to_sa(payload.get("result") or {})
