import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from trip_planner.db.trip_store import TripStore
from trip_planner.llm.completion_client import CompletionClient
from trip_planner.llm.itinerary_chain import generate_itinerary
from trip_planner.schemas.trip_schema import TripStatus
from trip_planner.services.authorizer import IdentityProvider, authenticate, authorize_trip
from trip_planner.services.trip_validator import validate_trip_input

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Trip planned successfully with AI!"


@dataclass
class PlanResult:
    itinerary: Dict[str, Any]
    succeeded: bool

    def to_payload(self) -> Dict[str, Any]:
        if self.succeeded:
            return {"success": True, "itinerary": self.itinerary, "message": SUCCESS_MESSAGE}
        return {
            "success": False,
            "itinerary": self.itinerary,
            "error": self.itinerary.get("error"),
            "retryable": True,
        }


# ------------------------------------------------------------------
# 🚀 Core Service: plan one trip
# ------------------------------------------------------------------
async def plan_trip(
    body: Any,
    authorization: Optional[str],
    identity_provider: IdentityProvider,
    store: TripStore,
    client: CompletionClient,
) -> PlanResult:
    """
    validate -> authenticate -> authorize -> generate -> persist.

    Every step depends on the previous one, so they run strictly in order.
    Raises TripPlannerError subclasses; malformed model output is not an error
    here, it comes back as a placeholder itinerary with ``succeeded=False``.
    """
    request = validate_trip_input(body)

    identity = await authenticate(authorization, identity_provider)
    await authorize_trip(identity, request.trip_id, store)

    logger.info(
        "Planning trip %s: destination=%r %s..%s travelers=%s budget=%s preferences=%d items",
        request.trip_id,
        request.destination,
        request.start_date,
        request.end_date,
        request.travelers,
        request.budget,
        len(request.preferences),
    )

    outcome = await generate_itinerary(request, client)

    status = TripStatus.PLANNED if outcome.succeeded else TripStatus.DRAFT
    await store.save_itinerary(request.trip_id, identity.id, outcome.itinerary, status)

    return PlanResult(itinerary=outcome.itinerary, succeeded=outcome.succeeded)
