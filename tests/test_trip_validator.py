from datetime import date

import pytest

from tests.fakes import TRIP_ID
from trip_planner.errors import ValidationError
from trip_planner.services.trip_validator import sanitize_text, validate_trip_input


def _error(body):
    with pytest.raises(ValidationError) as excinfo:
        validate_trip_input(body)
    return excinfo.value.message


def test_paris_request_is_valid(trip_body):
    req = validate_trip_input(trip_body)

    assert req.trip_id == TRIP_ID
    assert req.destination == "Paris"
    assert req.start_date == date(2024, 6, 1)
    assert req.end_date == date(2024, 6, 3)
    assert req.travelers == 2
    assert req.budget == 50000
    assert req.preferences == ["Food & Drinks"]
    assert req.duration_days == 2


def test_revalidating_a_validated_request_is_a_no_op(trip_body):
    trip_body["destination"] = "<b>Rome</b> {old town}"
    trip_body["preferences"] = ["Museums", 7, "<script>", "x" * 80]
    req = validate_trip_input(trip_body)

    assert validate_trip_input(req.to_payload()) == req


def test_defaults_for_optional_fields(trip_body):
    for key in ("travelers", "budget", "preferences"):
        del trip_body[key]
    req = validate_trip_input(trip_body)

    assert req.travelers == 1
    assert req.budget is None
    assert req.preferences == []


@pytest.mark.parametrize("body", [None, [], "trip", 42])
def test_body_must_be_an_object(body):
    assert _error(body) == "Invalid request body"


@pytest.mark.parametrize("trip_id", [None, "", "not-a-uuid", "3f1c2a9e8b7d4c6e9a1b2d3e4f5a6b7c", TRIP_ID + "0"])
def test_trip_id_must_be_a_uuid(trip_body, trip_id):
    trip_body["tripId"] = trip_id
    assert _error(trip_body) == "Invalid or missing tripId"


def test_trip_id_is_case_insensitive(trip_body):
    trip_body["tripId"] = TRIP_ID.upper()
    assert validate_trip_input(trip_body).trip_id == TRIP_ID.upper()


def test_first_failure_wins(trip_body):
    trip_body["tripId"] = "bad"
    trip_body["destination"] = ""
    trip_body["endDate"] = "2020-01-01"
    assert _error(trip_body) == "Invalid or missing tripId"


@pytest.mark.parametrize("destination", [None, "", "   ", 12])
def test_destination_is_required(trip_body, destination):
    trip_body["destination"] = destination
    assert _error(trip_body) == "Destination is required"


@pytest.mark.parametrize("destination", ["<>{}", " <> ", "{ }"])
def test_destination_empty_after_sanitizing_is_required(trip_body, destination):
    trip_body["destination"] = destination
    assert _error(trip_body) == "Destination is required"


def test_destination_length_limit(trip_body):
    trip_body["destination"] = "a" * 200
    assert validate_trip_input(trip_body).destination == "a" * 200

    trip_body["destination"] = "a" * 201
    assert _error(trip_body) == "Destination must be less than 200 characters"


def test_destination_is_sanitized(trip_body):
    trip_body["destination"] = "<Paris> {France}"
    assert validate_trip_input(trip_body).destination == "Paris France"


@pytest.mark.parametrize("value", [None, "", "2024-6-01", "01-06-2024", "2024-02-30", "2024-13-01", "2024-06-01T00:00"])
def test_start_date_format(trip_body, value):
    trip_body["startDate"] = value
    assert _error(trip_body) == "Invalid or missing startDate (format: YYYY-MM-DD)"


def test_end_date_format(trip_body):
    trip_body["endDate"] = "2024/06/03"
    assert _error(trip_body) == "Invalid or missing endDate (format: YYYY-MM-DD)"


def test_end_date_before_start_date_fails(trip_body):
    trip_body["endDate"] = "2024-05-31"
    assert _error(trip_body) == "End date must be after start date"


def test_same_day_trip_is_allowed(trip_body):
    trip_body["endDate"] = trip_body["startDate"]
    assert validate_trip_input(trip_body).duration_days == 0


def test_duration_boundary_is_exact(trip_body):
    trip_body["startDate"] = "2024-01-01"
    trip_body["endDate"] = "2024-03-31"
    assert validate_trip_input(trip_body).duration_days == 90

    trip_body["endDate"] = "2024-04-01"
    assert _error(trip_body) == "Trip duration cannot exceed 90 days"


@pytest.mark.parametrize("value, expected", [(1, 1), (20, 20), ("3", 3), (4.0, 4)])
def test_travelers_coercion(trip_body, value, expected):
    trip_body["travelers"] = value
    assert validate_trip_input(trip_body).travelers == expected


@pytest.mark.parametrize("value", [0, 21, 2.5, "two", None, True, -1])
def test_travelers_out_of_range(trip_body, value):
    trip_body["travelers"] = value
    assert _error(trip_body) == "Travelers must be an integer between 1 and 20"


@pytest.mark.parametrize("value, expected", [(0, 0), ("1500", 1500), (99.5, 99.5), (100_000_000, 100_000_000), (None, None)])
def test_budget_coercion(trip_body, value, expected):
    trip_body["budget"] = value
    assert validate_trip_input(trip_body).budget == expected


@pytest.mark.parametrize("value", [-1, 100_000_001, "lots", float("inf"), float("nan"), [100]])
def test_budget_out_of_range(trip_body, value):
    trip_body["budget"] = value
    assert _error(trip_body) == "Budget must be a number between 0 and 100000000"


def test_preferences_must_be_a_list(trip_body):
    trip_body["preferences"] = "Food"
    assert _error(trip_body) == "Preferences must be an array"


def test_preferences_limit(trip_body):
    trip_body["preferences"] = ["p"] * 15
    assert len(validate_trip_input(trip_body).preferences) == 15

    trip_body["preferences"] = ["p"] * 16
    assert _error(trip_body) == "Maximum 15 preferences allowed"


def test_preferences_are_cleaned(trip_body):
    trip_body["preferences"] = ["Hiking", None, 3, {"a": 1}, "<>", "{Art}", "y" * 60]
    assert validate_trip_input(trip_body).preferences == ["Hiking", "Art", "y" * 50]


def test_sanitize_strips_only_angle_and_curly_brackets():
    text = "a<b>{c}d & 'e' \"f\" [g] (h)"
    assert sanitize_text(text, 200) == "abcd & 'e' \"f\" [g] (h)"


@pytest.mark.parametrize("text", ["Paris", "<<{}>>", "x" * 70 + "<>", "{a}" * 30, ""])
def test_sanitize_is_idempotent(text):
    once = sanitize_text(text, 50)
    assert sanitize_text(once, 50) == once


def test_sanitize_non_string():
    assert sanitize_text(None, 50) == ""
