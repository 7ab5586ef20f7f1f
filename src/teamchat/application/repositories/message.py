from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, Sequence

from teamchat.domain.entities.message import Message


@dataclass(frozen=True, slots=True)
class NewMessage:
    channel_id: int
    type: str
    content: str
    sender_id: str
    image_url: str | None = None


@dataclass(frozen=True, slots=True)
class MessageRecord:
    """Read-model: a message joined with its sender's display name and readers."""

    message: Message
    sender_name: str | None
    read_by: tuple[str, ...]


class MessageReader(Protocol):
    async def list_for_channel(self, channel_id: int) -> list[MessageRecord]:
        """All messages of a channel ordered by (created_at, id) ascending."""
        ...

    async def get_record(self, message_id: int) -> MessageRecord | None: ...

    async def find_unread_ids(
        self,
        channel_id: int,
        user_id: str,
        message_ids: Sequence[int] | None = None,
    ) -> list[int]:
        """Ids not yet read by ``user_id`` and not authored by them."""
        ...

    async def last_for_channel(self, channel_id: int) -> Message | None: ...

    async def count_unread(self, channel_id: int, user_id: str) -> int: ...


class MessageWriter(Protocol):
    async def create(
        self,
        message: NewMessage,
        *,
        read_by: str | None = None,
        read_at: datetime | None = None,
    ) -> Message:
        """Insert a message; with ``read_by`` also insert that user's receipt."""
        ...
