"""WebSocket event envelope models."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from teamchat.domain.value_objects.enums import RealtimeEvent

UNSUPPORTED = "unsupported"


class Envelope(BaseModel):
    """Server → Client."""

    event: RealtimeEvent
    data: dict[str, Any] = {}


def connected(channel_id: int | None, user_id: str) -> Envelope:
    return Envelope(
        event=RealtimeEvent.CONNECTED,
        data={"channelId": channel_id, "userId": user_id},
    )


def error(code: str) -> Envelope:
    return Envelope(event=RealtimeEvent.ERROR, data={"code": code})
