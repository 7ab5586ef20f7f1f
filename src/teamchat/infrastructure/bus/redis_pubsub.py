"""Redis Pub/Sub relay so every process fans out to its own connections."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from teamchat.domain.value_objects.enums import RealtimeEvent
from teamchat.infrastructure.bus.serializer import deserialize_frame, serialize_frame
from teamchat.infrastructure.ws.protocol import Envelope
from teamchat.infrastructure.ws.registry import channel_key

logger = logging.getLogger(__name__)


class RedisRelayPublisher:
    """Implements application.ports.realtime.RealtimePublisher."""

    def __init__(self, redis: aioredis.Redis, channel: str) -> None:
        self._redis = redis
        self._channel = channel

    async def publish(
        self,
        channel_id: int,
        event: RealtimeEvent,
        data: dict[str, Any],
    ) -> None:
        try:
            raw = serialize_frame(channel_key(channel_id), Envelope(event=event, data=data))
            await self._redis.publish(self._channel, raw)
        except (ValueError, TypeError, RedisError):
            logger.exception("Failed to relay %s for channel %s", event, channel_id)


OnFrameCallback = Callable[[str, str], Coroutine[Any, Any, int]]


class RedisRelaySubscriber:
    """Background task that listens to the relay channel and fans frames out locally.

    A dropped Redis connection is retried with exponential backoff, so one
    outage does not stop realtime delivery for the rest of the process.
    """

    def __init__(
        self,
        redis: aioredis.Redis,
        channel: str,
        callback: OnFrameCallback,
        *,
        retry_initial: float = 0.5,
        retry_max: float = 30.0,
    ) -> None:
        self._redis = redis
        self._channel = channel
        self._callback = callback
        self._retry_initial = retry_initial
        self._retry_max = retry_max
        self._delay = retry_initial
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        self._task = asyncio.create_task(self._listen(), name="redis-relay-subscriber")
        logger.info("Redis relay subscriber started on channel=%s", self._channel)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Redis relay subscriber stopped")

    async def _listen(self) -> None:
        while True:
            try:
                await self._consume()
            except (RedisError, OSError):
                logger.warning(
                    "Redis relay connection lost, resubscribing in %.1fs",
                    self._delay,
                    exc_info=True,
                )
                await asyncio.sleep(self._delay)
                self._delay = min(self._delay * 2, self._retry_max)

    async def _consume(self) -> None:
        pubsub = self._redis.pubsub()
        try:
            await pubsub.subscribe(self._channel)
            self._delay = self._retry_initial
            async for message in pubsub.listen():
                if message["type"] != "message":
                    continue
                try:
                    key, frame = deserialize_frame(message["data"])
                    await self._callback(key, frame)
                except Exception:
                    logger.exception("Error processing relay message")
        finally:
            try:
                await pubsub.unsubscribe(self._channel)
            except (RedisError, OSError):
                logger.debug("Relay unsubscribe failed", exc_info=True)
            await pubsub.aclose()
