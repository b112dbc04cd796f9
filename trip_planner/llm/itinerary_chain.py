import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from trip_planner.errors import ExtractionError, GatewayError, RateLimited
from trip_planner.llm.completion_client import CompletionClient
from trip_planner.llm.itinerary_parser import extract_itinerary
from trip_planner.llm.itinerary_prompt import (
    build_itinerary_prompt,
    build_planner_messages,
    build_repair_messages,
)
from trip_planner.schemas.trip_schema import TripRequest

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "AI service is temporarily busy. Please try again in a few minutes."
INVALID_FORMAT_MESSAGE = (
    "AI returned an invalid itinerary format. Please tap Generate/Regenerate Itinerary to try again."
)


@dataclass
class ItineraryOutcome:
    itinerary: Dict[str, Any]
    succeeded: bool

    @property
    def error(self) -> Optional[str]:
        return None if self.succeeded else self.itinerary.get("error")


def error_placeholder(raw_content: Optional[str]) -> Dict[str, Any]:
    return {"error": INVALID_FORMAT_MESSAGE, "rawContent": raw_content}


# ------------------------------------------------------------
# Reading a gateway response
# ------------------------------------------------------------
def _is_rate_limit(error: Any) -> bool:
    if not isinstance(error, dict):
        return False
    if error.get("code") == 429 or error.get("status") == "RESOURCE_EXHAUSTED":
        return True

    # Upstream providers tuck their own error JSON into metadata.raw
    metadata = error.get("metadata")
    raw = metadata.get("raw") if isinstance(metadata, dict) else None
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return False
    if isinstance(raw, dict):
        inner = raw.get("error")
        if isinstance(inner, dict):
            return inner.get("status") == "RESOURCE_EXHAUSTED" or inner.get("code") == 429
    return False


def _raise_for_embedded_error(error: Any, where: str) -> None:
    if not error:
        return
    logger.error("AI gateway %s error payload: %s", where, error)
    if _is_rate_limit(error):
        raise RateLimited(RATE_LIMIT_MESSAGE)
    message = error.get("message") if isinstance(error, dict) else None
    raise GatewayError(message or "AI service error. Please try again.")


def read_completion_content(data: Dict[str, Any]) -> Optional[str]:
    """
    Return ``choices[0].message.content`` or None when it is missing.

    Error payloads, top-level or inside the first choice, are raised:
    RateLimited for capacity problems, GatewayError for anything else.
    """
    _raise_for_embedded_error(data.get("error"), "top-level")

    choices = data.get("choices")
    first = choices[0] if isinstance(choices, list) and choices else None
    if not isinstance(first, dict):
        return None

    _raise_for_embedded_error(first.get("error"), "choice")

    message = first.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content:
        return None
    return content


# ------------------------------------------------------------
# Repair escalation
# ------------------------------------------------------------
async def repair_itinerary(raw_content: str, client: CompletionClient) -> Dict[str, Any]:
    """Ask the model to fix its own output, once. Raises on any failure."""
    data = await client.complete(build_repair_messages(raw_content))
    repaired = read_completion_content(data)
    if repaired is None:
        raise ExtractionError("No content found in AI repair response")
    return extract_itinerary(repaired)


# ------------------------------------------------------------
# Main generator
# ------------------------------------------------------------
async def generate_itinerary(request: TripRequest, client: CompletionClient) -> ItineraryOutcome:
    """
    Produce an itinerary document for ``request``.

    Rate limits and gateway faults on the primary call propagate. Malformed
    output never does: after one repair attempt the outcome falls back to the
    error placeholder so the trip is always left displayable.
    """
    prompt = build_itinerary_prompt(request, request.duration_days)
    data = await client.complete(build_planner_messages(prompt))
    logger.info("AI response received for trip %s", request.trip_id)

    raw_content = read_completion_content(data)
    if raw_content is None:
        logger.error("No content found in AI response for trip %s", request.trip_id)
        return ItineraryOutcome(itinerary=error_placeholder(None), succeeded=False)

    try:
        itinerary = extract_itinerary(raw_content)
        logger.info("Parsed itinerary from AI response")
        return ItineraryOutcome(itinerary=itinerary, succeeded=True)
    except ExtractionError as e:
        logger.warning("Itinerary parse error (first pass): %s", e)

    try:
        itinerary = await repair_itinerary(raw_content, client)
    except (ExtractionError, GatewayError) as e:
        logger.error("Itinerary repair failed: %s", e)
        return ItineraryOutcome(itinerary=error_placeholder(raw_content), succeeded=False)

    logger.info("Parsed itinerary after AI repair")
    return ItineraryOutcome(itinerary=itinerary, succeeded=True)
