import json

import pytest

from trip_planner.llm.itinerary_prompt import (
    OUTPUT_SCHEMA_EXAMPLE,
    PLANNER_PREAMBLE,
    build_itinerary_prompt,
    build_planner_messages,
    build_repair_messages,
    format_amount,
)
from trip_planner.services.trip_validator import validate_trip_input

ITINERARY_FIELDS = [
    "overview",
    "bestTimeToVisit",
    "ecoFriendlySpots",
    "dailyItinerary",
    "accommodation",
    "transportation",
    "budgetBreakdown",
    "packingList",
    "localTips",
    "weather",
    "sustainabilityTips",
]


@pytest.fixture
def paris(trip_body):
    return validate_trip_input(trip_body)


def _prompt(req, **kwargs):
    kwargs.setdefault("currency_code", "INR")
    kwargs.setdefault("currency_symbol", "₹")
    return build_itinerary_prompt(req, req.duration_days, **kwargs)


def test_prompt_states_the_trip(paris):
    prompt = _prompt(paris)

    assert "Create a detailed travel itinerary for Paris from 2024-06-01 to 2024-06-03 (2 days) for 2 people." in prompt
    assert "Budget: ₹50000." in prompt
    assert "Traveler interests: Food & Drinks" in prompt
    assert "Indian Rupees (₹)" in prompt


def test_prompt_is_deterministic(paris):
    assert _prompt(paris) == _prompt(paris)


def test_single_traveler_and_flexible_budget(trip_body):
    trip_body.update(travelers=1, budget=None, preferences=[])
    prompt = _prompt(validate_trip_input(trip_body))

    assert "for 1 person." in prompt
    assert "Budget is flexible." in prompt
    assert "Traveler interests: General sightseeing" in prompt
    assert "within the budget of ₹flexible amount" in prompt


def test_zero_budget_reads_as_flexible(trip_body):
    trip_body["budget"] = 0
    assert "Budget is flexible." in _prompt(validate_trip_input(trip_body))


def test_multiple_preferences_are_comma_joined(trip_body):
    trip_body["preferences"] = ["Museums", "Hiking", "<Food>"]
    assert "Traveler interests: Museums, Hiking, Food" in _prompt(validate_trip_input(trip_body))


def test_accommodation_block_only_for_multi_day_trips(trip_body):
    assert "For multi-day trips (2 days)" in _prompt(validate_trip_input(trip_body))

    trip_body["endDate"] = "2024-06-02"
    assert "For multi-day trips" not in _prompt(validate_trip_input(trip_body))


def test_prompt_embeds_the_output_schema(paris):
    prompt = _prompt(paris)
    schema_text = prompt.split("Use exactly this structure:\n", 1)[1]

    assert json.loads(schema_text) == OUTPUT_SCHEMA_EXAMPLE
    for field in ITINERARY_FIELDS:
        assert f'"{field}"' in schema_text


def test_prompt_forbids_expressions_and_fences(paris):
    prompt = _prompt(paris)

    assert "All numeric fields MUST be plain numbers" in prompt
    assert '"230 * 6"' in prompt
    assert "no markdown/code fences" in prompt
    assert "Start with { and end with }" in prompt


def test_currency_override(paris):
    prompt = _prompt(paris, currency_code="USD", currency_symbol="$")
    assert "US Dollars ($)" in prompt
    assert "Budget: $50000." in prompt


def test_format_amount():
    assert format_amount(50000.0) == "50000"
    assert format_amount(99.5) == "99.5"


def test_planner_messages(paris):
    prompt = _prompt(paris)
    messages = build_planner_messages(prompt)

    assert len(messages) == 1
    assert messages[0].type == "human"
    assert messages[0].content == PLANNER_PREAMBLE + "\n\n" + prompt


def test_repair_messages_quote_raw_output_verbatim():
    raw = '{"cost": 230 * 6, "note": "{braces} stay"}'
    messages = build_repair_messages(raw)

    assert len(messages) == 1
    assert messages[0].content.endswith("(verbatim):\n\n" + raw)
    assert "All numeric fields must be plain numbers" in messages[0].content
