import re
import math
from datetime import date
from typing import Any, List, Optional

from trip_planner.errors import ValidationError
from trip_planner.schemas.trip_schema import TripRequest

MAX_DESTINATION_LENGTH = 200
MAX_PREFERENCE_LENGTH = 50
MAX_PREFERENCES = 15
MAX_TRIP_DAYS = 90
MIN_TRAVELERS, MAX_TRAVELERS = 1, 20
MAX_BUDGET = 100_000_000

_UUID_RE = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE)
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_UNSAFE_CHARS_RE = re.compile(r"[<>{}]")


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def sanitize_text(value: Any, max_length: int) -> str:
    """Truncate to ``max_length`` and drop ``<``, ``>``, ``{`` and ``}``."""
    if not isinstance(value, str):
        return ""
    return _UNSAFE_CHARS_RE.sub("", value[:max_length])


def _parse_date(value: Any) -> Optional[date]:
    if not value:
        return None
    text = str(value)
    if not _DATE_RE.fullmatch(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def _to_number(value: Any) -> Optional[float]:
    # JSON numbers and numeric strings only; booleans are not numbers here
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            return None
    return None


def _validate_travelers(value: Any) -> int:
    number = _to_number(value)
    if (
        number is None
        or not math.isfinite(number)
        or not number.is_integer()
        or not MIN_TRAVELERS <= number <= MAX_TRAVELERS
    ):
        raise ValidationError("Travelers must be an integer between 1 and 20")
    return int(number)


def _validate_budget(value: Any) -> float:
    number = _to_number(value)
    if number is None or not math.isfinite(number) or not 0 <= number <= MAX_BUDGET:
        raise ValidationError("Budget must be a number between 0 and 100000000")
    return number


def _validate_preferences(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        raise ValidationError("Preferences must be an array")
    if len(value) > MAX_PREFERENCES:
        raise ValidationError(f"Maximum {MAX_PREFERENCES} preferences allowed")
    cleaned = (sanitize_text(p, MAX_PREFERENCE_LENGTH) for p in value if isinstance(p, str))
    return [p for p in cleaned if p]


# ------------------------------------------------------------
# Main entry point
# ------------------------------------------------------------
def validate_trip_input(body: Any) -> TripRequest:
    """
    Turn a decoded request body into a TripRequest.

    Rules are checked in a fixed order and the first failure is raised as a
    ValidationError whose message is safe to show to the caller.
    """
    if not isinstance(body, dict):
        raise ValidationError("Invalid request body")

    trip_id = body.get("tripId")
    if not trip_id or not _UUID_RE.fullmatch(str(trip_id)):
        raise ValidationError("Invalid or missing tripId")

    destination = body.get("destination")
    if not isinstance(destination, str) or not destination.strip():
        raise ValidationError("Destination is required")
    if len(destination) > MAX_DESTINATION_LENGTH:
        raise ValidationError("Destination must be less than 200 characters")
    destination = sanitize_text(destination, MAX_DESTINATION_LENGTH)
    if not destination.strip():
        raise ValidationError("Destination is required")

    start_date = _parse_date(body.get("startDate"))
    if start_date is None:
        raise ValidationError("Invalid or missing startDate (format: YYYY-MM-DD)")
    end_date = _parse_date(body.get("endDate"))
    if end_date is None:
        raise ValidationError("Invalid or missing endDate (format: YYYY-MM-DD)")

    if end_date < start_date:
        raise ValidationError("End date must be after start date")
    if (end_date - start_date).days > MAX_TRIP_DAYS:
        raise ValidationError(f"Trip duration cannot exceed {MAX_TRIP_DAYS} days")

    travelers = 1
    if "travelers" in body:
        travelers = _validate_travelers(body["travelers"])

    budget = None
    if body.get("budget") is not None:
        budget = _validate_budget(body["budget"])

    preferences: List[str] = []
    if "preferences" in body:
        preferences = _validate_preferences(body["preferences"])

    return TripRequest(
        trip_id=str(trip_id),
        destination=destination,
        start_date=start_date,
        end_date=end_date,
        travelers=travelers,
        budget=budget,
        preferences=preferences,
    )
