import logging
from typing import Optional, Protocol

import httpx

from trip_planner.db.trip_store import TripStore
from trip_planner.errors import Forbidden, NotFound, Unauthorized
from trip_planner.schemas.trip_schema import Identity

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "Bearer "


class IdentityProvider(Protocol):
    async def get_user(self, token: str) -> Optional[Identity]:
        """Return the identity behind ``token``, or None if it is rejected."""
        ...


# ------------------------------------------------------------
# GoTrue-compatible identity service
# ------------------------------------------------------------
class HttpIdentityProvider:
    def __init__(
        self,
        auth_url: str,
        anon_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._user_url = auth_url.rstrip("/") + "/auth/v1/user"
        self._anon_key = anon_key
        self._timeout = timeout
        self._transport = transport

    async def get_user(self, token: str) -> Optional[Identity]:
        headers = {"Authorization": f"Bearer {token}", "apikey": self._anon_key}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.get(self._user_url, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Identity service unreachable: %s", e)
            return None

        if not resp.is_success:
            logger.warning("Identity service rejected token (HTTP %s)", resp.status_code)
            return None

        try:
            data = resp.json()
        except ValueError:
            logger.error("Identity service returned non-JSON response")
            return None

        user_id = data.get("id") if isinstance(data, dict) else None
        if not user_id:
            return None
        email = data.get("email")
        return Identity(id=str(user_id), email=email if isinstance(email, str) else None)


# ------------------------------------------------------------
# Authentication, then ownership
# ------------------------------------------------------------
def parse_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise Unauthorized("Unauthorized: Missing authorization header")
    if not authorization.startswith(_BEARER_PREFIX):
        raise Unauthorized("Unauthorized: Invalid token format")
    token = authorization[len(_BEARER_PREFIX):].strip()
    if not token:
        raise Unauthorized("Unauthorized: Invalid token format")
    return token


async def authenticate(authorization: Optional[str], identity_provider: IdentityProvider) -> Identity:
    token = parse_bearer_token(authorization)
    identity = await identity_provider.get_user(token)
    if identity is None:
        raise Unauthorized("Unauthorized: Invalid or expired token")
    logger.info("User authenticated: %s", identity.id)
    return identity


async def authorize_trip(identity: Identity, trip_id: str, store: TripStore) -> None:
    owner_id = await store.get_trip_owner(trip_id)
    if owner_id is None:
        logger.warning("Trip not found: %s", trip_id)
        raise NotFound("Trip not found")
    if owner_id != identity.id:
        logger.warning(
            "Unauthorized access attempt: user %s tried to access trip belonging to %s",
            identity.id,
            owner_id,
        )
        raise Forbidden("Unauthorized: You do not own this trip")
