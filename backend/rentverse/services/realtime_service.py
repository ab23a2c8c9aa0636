"""
Publishes user-scoped events to the hosted realtime broadcast endpoint.

Channels are ``user:<user_id>``; clients subscribe to their own channel and
receive ``notification`` and ``message`` events. Publishing is best-effort
and always happens after the database commit that produced the payload.
"""
import logging
from typing import Any

import httpx

from rentverse.config import settings

logger = logging.getLogger(__name__)


def user_channel(user_id: str) -> str:
    return f"user:{user_id}"


class RealtimePublisher:
    def __init__(self, url: str | None = None, api_key: str | None = None,
                 timeout: float | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout if timeout is not None else settings.realtime_timeout_seconds
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    async def publish(self, channel: str, event: str, payload: dict[str, Any]) -> None:
        if not self.enabled:
            logger.debug("Realtime disabled, dropping %s on %s", event, channel)
            return

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        body = {"messages": [{"topic": channel, "event": event, "payload": payload}]}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(f"{self.url.rstrip('/')}/api/broadcast", json=body, headers=headers)
            response.raise_for_status()


async def notify_user(publisher: RealtimePublisher, user_id: str, event: str, payload: dict[str, Any]) -> bool:
    """Publish to one user's channel, logging instead of raising on failure."""
    try:
        await publisher.publish(user_channel(user_id), event, payload)
        return True
    except Exception as exc:
        logger.warning("Realtime publish of %s to user %s failed: %s", event, user_id, exc)
        return False


def get_publisher() -> RealtimePublisher:
    return RealtimePublisher(
        url=settings.realtime_url,
        api_key=settings.realtime_api_key,
    )
