from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Message:
    id: int
    channel_id: int
    type: str
    content: str
    sender_id: str | None
    image_url: str | None
    created_at: datetime
