from __future__ import annotations

import unittest
from unittest import mock

import requests

from fakes import FakeSupabase
from pure360 import address
from pure360.address import (
    MapsUnavailable,
    autocomplete,
    build_full_address,
    clean_postal_code,
    fetch_maps_api_key,
    map_place_to_sa,
    parse_existing_address,
    place_details,
    validate_manual_address,
    validate_sa_address,
)

PLACE = {
    "formatted_address": "12 Main Rd, Rondebosch, Cape Town, 7700, South Africa",
    "address_components": [
        {"long_name": "12", "types": ["street_number"]},
        {"long_name": "Main Road", "types": ["route"]},
        {"long_name": "Rondebosch", "types": ["sublocality_level_1", "sublocality"]},
        {"long_name": "Cape Town", "types": ["locality", "political"]},
        {"long_name": "Western Cape", "types": ["administrative_area_level_1"]},
        {"long_name": "7700", "types": ["postal_code"]},
    ],
    "geometry": {"location": {"lat": -33.96, "lng": 18.47}},
}


def _response(payload):
    resp = mock.Mock()
    resp.json.return_value = payload
    resp.raise_for_status.return_value = None
    return resp


class TestManualAddress(unittest.TestCase):
    def test_too_short_or_missing_parts_gets_hints(self) -> None:
        self.assertFalse(validate_manual_address("abc").is_valid)
        self.assertFalse(validate_manual_address("123456").is_valid)
        self.assertFalse(validate_manual_address("").is_valid)

    def test_number_and_street_is_plausible(self) -> None:
        check = validate_manual_address("12 Main Road")
        self.assertTrue(check.is_valid)
        self.assertEqual(check.hints, [])

    def test_unsafe_characters_get_a_hint(self) -> None:
        check = validate_manual_address("12 Main Road <script>")
        self.assertFalse(check.is_valid)
        self.assertEqual(len(check.hints), 1)


class TestSAAddress(unittest.TestCase):
    def setUp(self) -> None:
        self.addr = {
            "unit": "4",
            "street": "12 Main Road",
            "suburb": "Rondebosch",
            "city": "Cape Town",
            "province": "Western Cape",
            "postal_code": "7700",
        }

    def test_complete_address_passes(self) -> None:
        self.assertEqual(validate_sa_address(self.addr), {})

    def test_bad_province_and_postal_code(self) -> None:
        self.addr.update(province="Cape Province", postal_code="77")
        self.assertEqual(set(validate_sa_address(self.addr)), {"province", "postal_code"})

    def test_postal_code_is_cleaned_to_four_digits(self) -> None:
        self.assertEqual(clean_postal_code("77-0 0x1"), "7700")

    def test_full_address_round_trip(self) -> None:
        full = build_full_address(self.addr)
        self.assertEqual(full, "Unit 4, 12 Main Road, Rondebosch, Cape Town, Western Cape, 7700")
        parsed = parse_existing_address("12 Main Road, Rondebosch, Cape Town, Western Cape, 7700")
        self.assertEqual(parsed["suburb"], "Rondebosch")
        self.assertEqual(parsed["postal_code"], "7700")
        self.assertEqual(parse_existing_address("12 Main Road"), {"street": "12 Main Road"})

    def test_place_is_mapped_to_sa_fields(self) -> None:
        sa = map_place_to_sa(PLACE)
        self.assertEqual(sa.street, "12 Main Road")
        self.assertEqual(sa.suburb, "Rondebosch")
        self.assertEqual(sa.province, "Western Cape")
        self.assertEqual((sa.latitude, sa.longitude), (-33.96, 18.47))


class TestPlacesLookup(unittest.TestCase):
    def test_short_query_does_not_call_the_api(self) -> None:
        with mock.patch.object(address.requests, "get") as get:
            self.assertEqual(autocomplete("12", "key"), [])
        get.assert_not_called()

    def test_autocomplete_is_restricted_to_south_africa(self) -> None:
        payload = {"status": "OK", "predictions": [{"description": "12 Main Rd, Rondebosch", "place_id": "p1"}]}
        with mock.patch.object(address.requests, "get", return_value=_response(payload)) as get:
            results = autocomplete("12 Main", "key")

        self.assertEqual(results, [{"description": "12 Main Rd, Rondebosch", "place_id": "p1"}])
        self.assertEqual(get.call_args.kwargs["params"]["components"], "country:za")

    def test_place_details(self) -> None:
        with mock.patch.object(address.requests, "get", return_value=_response({"status": "OK", "result": PLACE})):
            self.assertEqual(place_details("p1", "key").postal_code, "7700")

    def test_api_refusal_raises_maps_unavailable(self) -> None:
        payload = {"status": "REQUEST_DENIED", "error_message": "bad key"}
        with mock.patch.object(address.requests, "get", return_value=_response(payload)):
            with self.assertRaises(MapsUnavailable):
                autocomplete("12 Main", "key")

        with mock.patch.object(address.requests, "get", side_effect=requests.ConnectionError("offline")):
            with self.assertRaises(MapsUnavailable):
                autocomplete("12 Main", "key")

    def test_maps_key_needs_a_session(self) -> None:
        db = FakeSupabase()
        self.assertIsNone(fetch_maps_api_key(db))

        db.sign_in_as("u1")
        db.functions.responses["get-maps-api-key"] = {"apiKey": "maps-key"}
        self.assertEqual(fetch_maps_api_key(db), "maps-key")

    def test_maps_key_failure_falls_back(self) -> None:
        db = FakeSupabase()
        db.sign_in_as("u1")
        db.functions.responses["get-maps-api-key"] = RuntimeError("function down")
        self.assertEqual(fetch_maps_api_key(db, fallback="local-key"), "local-key")


if __name__ == "__main__":
    unittest.main()
