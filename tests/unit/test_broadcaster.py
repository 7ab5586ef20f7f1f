from __future__ import annotations

import json

import pytest

from teamchat.domain.value_objects.enums import RealtimeEvent
from teamchat.infrastructure.ws.broadcaster import Broadcaster
from teamchat.infrastructure.ws.connection import Connection
from teamchat.infrastructure.ws.protocol import Envelope
from teamchat.infrastructure.ws.registry import GLOBAL_KEY, ChannelRegistry, channel_key
from tests.conftest import FakeSocket


async def _join(registry: ChannelRegistry, key: str, n: int) -> list[FakeSocket]:
    sockets = [FakeSocket() for _ in range(n)]
    for i, socket in enumerate(sockets):
        conn = Connection(socket)
        await conn.accept()
        registry.join(conn, key, f"{key}-user-{i}")
    return sockets


@pytest.fixture
def registry() -> ChannelRegistry:
    return ChannelRegistry()


@pytest.mark.asyncio
async def test_fan_out_reaches_channel_and_global(registry):
    channel_sockets = await _join(registry, channel_key(7), 3)
    global_sockets = await _join(registry, GLOBAL_KEY, 2)
    broadcaster = Broadcaster(registry)

    delivered = await broadcaster.broadcast(
        channel_key(7), Envelope(event=RealtimeEvent.MESSAGE_NEW, data={"id": 1})
    )

    assert delivered == 5
    assert all(len(s.sent) == 1 for s in channel_sockets + global_sockets)


@pytest.mark.asyncio
async def test_other_channel_reaches_only_global(registry):
    channel_sockets = await _join(registry, channel_key(7), 3)
    global_sockets = await _join(registry, GLOBAL_KEY, 2)
    broadcaster = Broadcaster(registry)

    delivered = await broadcaster.broadcast(
        channel_key(8), Envelope(event=RealtimeEvent.MESSAGE_NEW, data={"id": 1})
    )

    assert delivered == 2
    assert all(s.sent == [] for s in channel_sockets)
    assert all(len(s.sent) == 1 for s in global_sockets)


@pytest.mark.asyncio
async def test_broadcast_to_global_sends_once(registry):
    global_sockets = await _join(registry, GLOBAL_KEY, 2)

    delivered = await Broadcaster(registry).broadcast(
        GLOBAL_KEY, Envelope(event=RealtimeEvent.MESSAGE_READ, data={})
    )

    assert delivered == 2
    assert all(len(s.sent) == 1 for s in global_sockets)


@pytest.mark.asyncio
async def test_every_recipient_gets_identical_text(registry):
    sockets = await _join(registry, channel_key(7), 2) + await _join(registry, GLOBAL_KEY, 1)

    await Broadcaster(registry).publish(7, RealtimeEvent.MESSAGE_NEW, {"content": "hi"})

    frames = {s.sent[0] for s in sockets}
    assert len(frames) == 1
    assert json.loads(frames.pop()) == {"event": "message:new", "data": {"content": "hi"}}


@pytest.mark.asyncio
async def test_failed_send_is_swallowed_and_not_removed(registry):
    good, bad = await _join(registry, channel_key(7), 2)
    bad.fail_sends = True

    delivered = await Broadcaster(registry).broadcast(
        channel_key(7), Envelope(event=RealtimeEvent.MESSAGE_NEW, data={})
    )

    assert delivered == 1
    assert len(good.sent) == 1
    assert registry.connection_count == 2


@pytest.mark.asyncio
async def test_connections_not_open_are_skipped(registry):
    socket = FakeSocket()
    pending = Connection(socket)
    registry.join(pending, channel_key(7), "u1")

    delivered = await Broadcaster(registry).broadcast(
        channel_key(7), Envelope(event=RealtimeEvent.MESSAGE_NEW, data={})
    )

    assert delivered == 0
    assert socket.sent == []


@pytest.mark.asyncio
async def test_empty_bucket_delivers_nothing(registry):
    assert await Broadcaster(registry).fan_out(channel_key(1), "{}") == 0
