from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from teamchat.api.deps import AuthenticatorDep
from teamchat.application.exceptions import AuthError
from teamchat.infrastructure.ws import protocol
from teamchat.infrastructure.ws.broadcaster import Broadcaster
from teamchat.infrastructure.ws.connection import Connection
from teamchat.infrastructure.ws.registry import GLOBAL_KEY, channel_key

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])

CLOSE_MISSING_TOKEN = 4001
CLOSE_INVALID_TOKEN = 4002


def parse_channel_id(raw: str | None) -> int | None:
    """Absent, non-numeric or non-positive ids mean a global-only connection."""
    if raw is None:
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    return value if value > 0 else None


@router.websocket("/ws")
async def ws_endpoint(
    websocket: WebSocket,
    authenticator: AuthenticatorDep,
    token: Annotated[str | None, Query()] = None,
    channel_id_raw: Annotated[str | None, Query(alias="channelId")] = None,
) -> None:
    broadcaster: Broadcaster = websocket.app.state.broadcaster
    registry = broadcaster.registry

    # Accept first so the close code reaches the client.
    connection = Connection(websocket)
    await connection.accept()

    if not token:
        await connection.close(CLOSE_MISSING_TOKEN, "token is required")
        return
    try:
        identity = await authenticator.verify(token)
    except AuthError as exc:
        logger.debug("WS auth failed: %s", exc.kind)
        await connection.close(CLOSE_INVALID_TOKEN, "token is invalid")
        return

    channel_id = parse_channel_id(channel_id_raw)
    key = channel_key(channel_id) if channel_id is not None else GLOBAL_KEY
    registry.join(connection, key, identity.id)

    try:
        await broadcaster.send(connection, protocol.connected(channel_id, identity.id))
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                connection.mark_closed()
                break
            await broadcaster.send(connection, protocol.error(protocol.UNSUPPORTED))
    except WebSocketDisconnect:
        connection.mark_closed()
    except Exception:
        logger.exception("WS error on %s for user %s", key, identity.id)
        connection.mark_errored()
    finally:
        registry.leave(connection)
