"""
Coinbase Exchange WebSocket client.

Handles:
1. Connecting to the public feed and sending the level2 subscription once
2. Receiving one JSON frame at a time for the poll loop
3. Closing the connection on shutdown

No reconnection: any transport failure raises FeedError and ends the session.
"""

from __future__ import annotations

import logging
from typing import Any

import aiohttp
import orjson

# Coinbase Exchange public feed
WS_FEED_URL = "wss://ws-feed.exchange.coinbase.com"
LEVEL2_CHANNEL = "level2"

logger = logging.getLogger(__name__)


class FeedError(Exception):
    """The feed connection failed or delivered an unusable frame."""


class CoinbaseClient:
    """
    Async level2 feed client for one instrument.

    Usage:
        async with CoinbaseClient("ETH-USD") as client:
            while True:
                frame = await client.next_frame()
    """

    def __init__(self, identifier: str, url: str = WS_FEED_URL) -> None:
        self.identifier = identifier
        self.url = url

        self._session: aiohttp.ClientSession | None = None
        self._ws: aiohttp.ClientWebSocketResponse | None = None

    def subscription_message(self) -> dict:
        """Subscribe request naming the instrument and the level2 channel."""
        return {
            "type": "subscribe",
            "product_ids": [self.identifier],
            "channels": [LEVEL2_CHANNEL],
        }

    async def subscribe(self) -> None:
        """Connect and send the subscription."""
        logger.info("Connecting to %s for %s", self.url, self.identifier)
        self._session = aiohttp.ClientSession()
        try:
            self._ws = await self._session.ws_connect(self.url)
            await self._ws.send_str(orjson.dumps(self.subscription_message()).decode())
        except (aiohttp.ClientError, OSError) as e:
            await self.close()
            raise FeedError(f"Could not subscribe to {self.url}: {e}") from e

    async def next_frame(self) -> Any:
        """
        Wait for the next frame.

        Returns the decoded JSON value, or None for text that is not JSON.
        Raises FeedError when the connection is closed or broken.
        """
        if self._ws is None:
            raise FeedError("Client is not subscribed")

        try:
            msg = await self._ws.receive()
        except (aiohttp.ClientError, OSError) as e:
            raise FeedError(f"Error receiving next frame: {e}") from e

        if msg.type == aiohttp.WSMsgType.TEXT:
            try:
                return orjson.loads(msg.data)
            except orjson.JSONDecodeError:
                logger.warning("Undecodable text frame: %.200s", msg.data)
                return None

        if msg.type == aiohttp.WSMsgType.ERROR:
            raise FeedError(f"Error receiving next frame: {msg.data}")
        raise FeedError(f"Unexpected {msg.type.name} frame from feed")

    async def close(self) -> None:
        """Disconnect this client. Safe to call more than once."""
        if self._ws is not None:
            ws, self._ws = self._ws, None
            await ws.close()
        if self._session is not None:
            session, self._session = self._session, None
            await session.close()
            logger.info("Disconnected from %s", self.url)

    async def __aenter__(self) -> CoinbaseClient:
        await self.subscribe()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
