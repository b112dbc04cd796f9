"""
Error taxonomy for the trip planner.

Every failure the planner can report to a caller is a ``TripPlannerError``.
The HTTP status and the ``retryable`` hint live on the class so the router
can turn any of them into a response without a lookup table.
"""
from typing import Any, Dict


class TripPlannerError(Exception):
    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": False, "error": self.message}
        if self.retryable:
            payload["retryable"] = True
        return payload


class ValidationError(TripPlannerError):
    """Caller input is malformed."""
    status_code = 400


class Unauthorized(TripPlannerError):
    status_code = 401


class Forbidden(TripPlannerError):
    status_code = 403


class NotFound(TripPlannerError):
    status_code = 404


class GatewayError(TripPlannerError):
    """Transport or infrastructure failure talking to the AI gateway."""
    status_code = 500


class RateLimited(GatewayError):
    """The gateway reported a transient capacity problem."""
    status_code = 429
    retryable = True


class ExtractionError(TripPlannerError):
    """Model output could not be turned into a JSON object."""
    status_code = 500


class PersistenceError(TripPlannerError):
    status_code = 500


class ConfigurationError(TripPlannerError):
    """A required setting is missing."""
    status_code = 500
