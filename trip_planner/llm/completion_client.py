import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
from langchain_core.messages import BaseMessage

from trip_planner.errors import GatewayError, RateLimited

logger = logging.getLogger(__name__)

_ROLES = {"human": "user", "ai": "assistant", "system": "system"}


def to_chat_messages(messages: Sequence[BaseMessage]) -> List[Dict[str, str]]:
    """langchain messages -> OpenAI-style ``{"role", "content"}`` dicts."""
    return [{"role": _ROLES.get(m.type, "user"), "content": m.content} for m in messages]


class CompletionClient:
    """
    Thin client for an OpenAI-compatible chat-completions gateway.

    ``complete`` returns the decoded JSON body untouched; interpreting
    ``choices`` / ``error`` is the caller's job. Anything that prevents getting
    a JSON object back is a GatewayError.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        model: str,
        max_tokens: int = 8000,
        temperature: float = 0.2,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self._api_key = api_key
        self._transport = transport

    async def complete(self, messages: Sequence[BaseMessage]) -> Dict[str, Any]:
        payload = {
            "model": self.model,
            "messages": to_chat_messages(messages),
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                # httpx timeouts are per read/write; this bounds the whole exchange
                resp = await asyncio.wait_for(
                    client.post(self.url, json=payload, headers=headers),
                    self.timeout,
                )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.error("AI gateway timed out after %ss", self.timeout)
            raise GatewayError(f"AI gateway timed out after {self.timeout:g}s") from e
        except httpx.HTTPError as e:
            logger.error("AI gateway transport error: %s", e)
            raise GatewayError(f"AI gateway request failed: {e}") from e

        if resp.status_code == 429:
            logger.warning("AI gateway rate limited the request")
            raise RateLimited("AI service is temporarily busy. Please try again in a few minutes.")
        if not resp.is_success:
            logger.error("AI gateway error %s: %s", resp.status_code, resp.text[:500])
            raise GatewayError(f"AI gateway error: {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise GatewayError("AI gateway returned non-JSON response") from e
        if not isinstance(data, dict):
            raise GatewayError("AI gateway returned non-JSON response")
        return data
