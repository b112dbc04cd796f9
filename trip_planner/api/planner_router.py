import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from trip_planner.api.dependencies import get_completion_client, get_identity_provider, get_trip_store
from trip_planner.errors import TripPlannerError
from trip_planner.services.trip_planner_service import plan_trip

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai-trip-planner", tags=["AI Trip Planner"])


@router.post("")
async def create_trip_plan(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    identity_provider=Depends(get_identity_provider),
    store=Depends(get_trip_store),
    client=Depends(get_completion_client),
):
    """
    Generate an AI itinerary for one of the caller's trips and store it on the trip.
    """
    try:
        body = await request.json()
    except ValueError:
        body = None

    try:
        result = await plan_trip(body, authorization, identity_provider, store, client)
    except TripPlannerError as e:
        log = logger.warning if e.retryable else logger.error
        log("Trip planning failed (%s): %s", type(e).__name__, e.message)
        return JSONResponse(status_code=e.status_code, content=e.to_payload())
    except Exception as e:
        logger.exception("Error in AI trip planner")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e) or "Unknown error occurred"})

    return result.to_payload()
