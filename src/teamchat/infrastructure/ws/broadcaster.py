from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from teamchat.domain.value_objects.enums import RealtimeEvent
from teamchat.infrastructure.ws.connection import Connection
from teamchat.infrastructure.ws.protocol import Envelope
from teamchat.infrastructure.ws.registry import GLOBAL_KEY, ChannelRegistry, channel_key

logger = logging.getLogger(__name__)


class Broadcaster:
    """Pushes envelopes to the live connections of a channel and the global bucket."""

    def __init__(self, registry: ChannelRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ChannelRegistry:
        return self._registry

    def _targets(self, key: str) -> frozenset[Connection]:
        targets = self._registry.bucket_for(key)
        if key != GLOBAL_KEY:
            targets = targets | self._registry.bucket_for(GLOBAL_KEY)
        return targets

    async def broadcast(self, key: str, envelope: Envelope) -> int:
        try:
            raw = envelope.model_dump_json()
        except (ValueError, TypeError):
            logger.exception("Failed to serialize %s envelope for %s", envelope.event, key)
            return 0
        return await self.fan_out(key, raw)

    async def fan_out(self, key: str, raw: str) -> int:
        delivered = 0
        for connection in self._targets(key):
            if not connection.is_open:
                continue
            try:
                await connection.send_text(raw)
            except Exception as exc:
                logger.debug("WS delivery to %s failed: %s", key, exc)
                continue
            delivered += 1
        return delivered

    async def send(self, connection: Connection, envelope: Envelope) -> bool:
        if not connection.is_open:
            return False
        try:
            await connection.send_text(envelope.model_dump_json())
        except Exception as exc:
            logger.debug("WS send failed: %s", exc)
            return False
        return True

    async def publish(
        self,
        channel_id: int,
        event: RealtimeEvent,
        data: dict[str, Any],
    ) -> None:
        try:
            envelope = Envelope(event=event, data=data)
        except PydanticValidationError:
            logger.exception("Invalid %s payload for channel %s", event, channel_id)
            return
        await self.broadcast(channel_key(channel_id), envelope)
