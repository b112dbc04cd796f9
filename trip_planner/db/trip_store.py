import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol

from pymongo.errors import PyMongoError

from trip_planner.errors import PersistenceError
from trip_planner.schemas.trip_schema import TripStatus

logger = logging.getLogger(__name__)


class TripStore(Protocol):
    async def get_trip_owner(self, trip_id: str) -> Optional[str]:
        """Return the owning user id, or None when the trip does not exist."""
        ...

    async def save_itinerary(
        self,
        trip_id: str,
        owner_id: str,
        itinerary: Dict[str, Any],
        status: TripStatus,
    ) -> None:
        ...


# ------------------------------------------------------------
# Mongo-backed trip store
# ------------------------------------------------------------
class MongoTripStore:
    """
    Trips live in one collection keyed by the trip id string (``_id``).
    Documents carry ``user_id``, ``status``, ``ai_itinerary`` and ``updated_at``.
    """

    def __init__(self, collection):
        self._collection = collection

    async def get_trip_owner(self, trip_id: str) -> Optional[str]:
        try:
            doc = await self._collection.find_one({"_id": trip_id}, {"user_id": 1})
        except PyMongoError as e:
            raise PersistenceError(f"Failed to load trip: {e}") from e
        if not doc:
            return None
        owner = doc.get("user_id")
        return str(owner) if owner is not None else None

    async def save_itinerary(
        self,
        trip_id: str,
        owner_id: str,
        itinerary: Dict[str, Any],
        status: TripStatus,
    ) -> None:
        # Scoped by owner too: the trip may have changed hands since the lookup
        query = {"_id": trip_id, "user_id": owner_id}
        update = {
            "$set": {
                "ai_itinerary": itinerary,
                "status": TripStatus(status).value,
                "updated_at": datetime.now(timezone.utc),
            }
        }
        try:
            result = await self._collection.update_one(query, update)
        except PyMongoError as e:
            logger.error("Trip update failed for %s: %s", trip_id, e)
            raise PersistenceError(f"Failed to update trip: {e}") from e

        if result.matched_count == 0:
            logger.error("Trip update matched no document: trip=%s owner=%s", trip_id, owner_id)
            raise PersistenceError("Failed to update trip: trip not found for this user")

        logger.info("Trip %s updated (status=%s)", trip_id, TripStatus(status).value)
