from __future__ import annotations

from typing import Any, Protocol

from teamchat.domain.value_objects.enums import RealtimeEvent


class RealtimePublisher(Protocol):
    """Delivers an event to every live listener of a channel (and the global bucket)."""

    async def publish(
        self, channel_id: int, event: RealtimeEvent, data: dict[str, Any]
    ) -> None: ...
