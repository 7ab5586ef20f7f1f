"""A WebSocket wrapped with an explicit lifecycle state."""
from __future__ import annotations

import logging
from enum import StrEnum
from typing import Protocol

from starlette.websockets import WebSocketDisconnect

logger = logging.getLogger(__name__)


class ConnectionState(StrEnum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class ConnectionEvent(StrEnum):
    ACCEPTED = "accepted"
    CLOSE_REQUESTED = "close_requested"
    CLOSED = "closed"
    ERRORED = "errored"


_TRANSITIONS: dict[tuple[ConnectionState, ConnectionEvent], ConnectionState] = {
    (ConnectionState.CONNECTING, ConnectionEvent.ACCEPTED): ConnectionState.OPEN,
    (ConnectionState.CONNECTING, ConnectionEvent.CLOSE_REQUESTED): ConnectionState.CLOSING,
    (ConnectionState.CONNECTING, ConnectionEvent.CLOSED): ConnectionState.CLOSED,
    (ConnectionState.CONNECTING, ConnectionEvent.ERRORED): ConnectionState.CLOSED,
    (ConnectionState.OPEN, ConnectionEvent.CLOSE_REQUESTED): ConnectionState.CLOSING,
    (ConnectionState.OPEN, ConnectionEvent.CLOSED): ConnectionState.CLOSED,
    (ConnectionState.OPEN, ConnectionEvent.ERRORED): ConnectionState.CLOSED,
    (ConnectionState.CLOSING, ConnectionEvent.CLOSED): ConnectionState.CLOSED,
    (ConnectionState.CLOSING, ConnectionEvent.ERRORED): ConnectionState.CLOSED,
}


def transition(state: ConnectionState, event: ConnectionEvent) -> ConnectionState:
    """Next state for ``event``; events that don't apply leave the state as is."""
    return _TRANSITIONS.get((state, event), state)


class Socket(Protocol):
    async def accept(self) -> None: ...

    async def send_text(self, data: str) -> None: ...

    async def close(self, code: int = 1000, reason: str | None = None) -> None: ...


class Connection:
    """One client socket. Identity-hashed so it can key the registry tables."""

    def __init__(self, socket: Socket) -> None:
        self._socket = socket
        self._state = ConnectionState.CONNECTING

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is ConnectionState.OPEN

    def _apply(self, event: ConnectionEvent) -> None:
        self._state = transition(self._state, event)

    async def accept(self) -> None:
        await self._socket.accept()
        self._apply(ConnectionEvent.ACCEPTED)

    async def send_text(self, raw: str) -> None:
        await self._socket.send_text(raw)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        if self._state in (ConnectionState.CLOSING, ConnectionState.CLOSED):
            return
        self._apply(ConnectionEvent.CLOSE_REQUESTED)
        try:
            await self._socket.close(code=code, reason=reason)
        except (RuntimeError, OSError, WebSocketDisconnect) as exc:
            # the peer may already be gone
            logger.debug("close(%d) on a dead socket: %s", code, exc)
        finally:
            self._apply(ConnectionEvent.CLOSED)

    def mark_closed(self) -> None:
        self._apply(ConnectionEvent.CLOSED)

    def mark_errored(self) -> None:
        self._apply(ConnectionEvent.ERRORED)
