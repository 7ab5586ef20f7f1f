"""In-process registry of live connections grouped by channel."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from teamchat.infrastructure.ws.connection import Connection

logger = logging.getLogger(__name__)

GLOBAL_KEY = "global"


def channel_key(channel_id: int) -> str:
    return f"channel-{channel_id}"


@dataclass(frozen=True, slots=True)
class ConnectionTag:
    user_id: str
    channel_key: str


class ChannelRegistry:
    """Tracks which bucket each live connection belongs to.

    ``_tags`` is the single source of truth for membership; ``_buckets`` is
    the index the broadcaster reads. Every method is synchronous so a
    mutation can never interleave with another coroutine.
    """

    def __init__(self) -> None:
        self._buckets: dict[str, set[Connection]] = {}
        self._tags: dict[Connection, ConnectionTag] = {}

    def join(self, connection: Connection, channel_key: str, user_id: str) -> ConnectionTag:
        if connection in self._tags:
            self.leave(connection)
        tag = ConnectionTag(user_id=user_id, channel_key=channel_key)
        self._buckets.setdefault(channel_key, set()).add(connection)
        self._tags[connection] = tag
        logger.debug(
            "WS joined %s: user=%s (bucket=%d)",
            channel_key,
            user_id,
            len(self._buckets[channel_key]),
        )
        return tag

    def leave(self, connection: Connection) -> ConnectionTag | None:
        tag = self._tags.pop(connection, None)
        if tag is None:
            return None
        bucket = self._buckets.get(tag.channel_key)
        if bucket is not None:
            bucket.discard(connection)
            if not bucket:
                del self._buckets[tag.channel_key]
        logger.debug("WS left %s: user=%s", tag.channel_key, tag.user_id)
        return tag

    def tag_for(self, connection: Connection) -> ConnectionTag | None:
        return self._tags.get(connection)

    def bucket_for(self, channel_key: str) -> frozenset[Connection]:
        return frozenset(self._buckets.get(channel_key, ()))

    def __contains__(self, connection: object) -> bool:
        return connection in self._tags

    @property
    def connection_count(self) -> int:
        return len(self._tags)

    @property
    def bucket_count(self) -> int:
        return len(self._buckets)

    async def close_all(self, code: int = 1001) -> None:
        connections = list(self._tags)
        for connection in connections:
            self.leave(connection)
        for connection in connections:
            await connection.close(code)
        if connections:
            logger.info("Closed %d WebSocket connection(s)", len(connections))
