from trip_planner.config import settings
from trip_planner.db.mongo import get_collection
from trip_planner.db.trip_store import MongoTripStore
from trip_planner.errors import ConfigurationError
from trip_planner.llm.completion_client import CompletionClient
from trip_planner.services.authorizer import HttpIdentityProvider


def get_identity_provider() -> HttpIdentityProvider:
    if not settings.AUTH_URL:
        raise ConfigurationError("Identity service configuration missing")
    return HttpIdentityProvider(settings.AUTH_URL, settings.AUTH_ANON_KEY)


def get_trip_store() -> MongoTripStore:
    return MongoTripStore(get_collection(settings.COLL_TRIPS))


def get_completion_client() -> CompletionClient:
    if not settings.AI_GATEWAY_API_KEY:
        raise ConfigurationError("AI gateway API key not configured")
    return CompletionClient(
        url=settings.AI_GATEWAY_URL,
        api_key=settings.AI_GATEWAY_API_KEY,
        model=settings.AI_MODEL,
        max_tokens=settings.AI_MAX_TOKENS,
        temperature=settings.AI_TEMPERATURE,
        timeout=settings.AI_TIMEOUT_SECONDS,
    )
