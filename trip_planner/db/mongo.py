# -------------------------------------------------------------
# Trip database handle (motor)
# -------------------------------------------------------------
import asyncio
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase, AsyncIOMotorCollection

from trip_planner.config import settings

logger = logging.getLogger(__name__)

_mongo_client: Optional[AsyncIOMotorClient] = None
_mongo_db: Optional[AsyncIOMotorDatabase] = None
_lock = asyncio.Lock()


async def init_mongo() -> AsyncIOMotorDatabase:
    """Connect and ping once at startup; later calls reuse the same database."""
    global _mongo_client, _mongo_db

    async with _lock:
        if _mongo_db is not None:
            return _mongo_db

        # Only host/port in logs, never credentials
        logger.info("Connecting to trip database at %s", settings.MONGO_URI.split("@")[-1])

        client = AsyncIOMotorClient(settings.MONGO_URI)
        db = client[settings.MONGO_DB]
        await db.command("ping")

        _mongo_client = client
        _mongo_db = db
        logger.info("Trip database %s ready", settings.MONGO_DB)

    return _mongo_db


def get_database() -> AsyncIOMotorDatabase:
    # Before init_mongo finishes, hand out an unpinged handle; motor connects lazily
    global _mongo_client

    if _mongo_db is not None:
        return _mongo_db

    if _mongo_client is None:
        _mongo_client = AsyncIOMotorClient(settings.MONGO_URI)
    return _mongo_client[settings.MONGO_DB]


def get_collection(name: str) -> AsyncIOMotorCollection:
    if not name:
        raise ValueError("Collection name is required")
    return get_database()[name]
