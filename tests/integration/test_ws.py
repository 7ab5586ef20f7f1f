"""WebSocket handshake tests."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from teamchat.api.deps import get_authenticator
from teamchat.app import create_app
from teamchat.application.dto.identity import Identity
from teamchat.infrastructure.auth.jwt_authenticator import TokenAuthenticator
from teamchat.infrastructure.ws.registry import GLOBAL_KEY, channel_key
from tests.conftest import EMPLOYEE_ID


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    return TestClient(app)


def _token() -> str:
    return get_authenticator().issue_access(Identity(id=EMPLOYEE_ID))


def test_missing_token_closes_4001(client):
    with client.websocket_connect("/ws?channelId=7") as ws:
        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_text()
    assert exc_info.value.code == 4001


def test_invalid_token_closes_4002(client):
    with client.websocket_connect("/ws?token=garbage") as ws:
        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_text()
    assert exc_info.value.code == 4002


def test_token_signed_with_other_secret_closes_4002(client):
    forged = TokenAuthenticator("some-other-secret-0123456789", "x" * 32).issue_access(
        Identity(id=EMPLOYEE_ID)
    )
    with client.websocket_connect(f"/ws?token={forged}") as ws:
        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_text()
    assert exc_info.value.code == 4002


def test_connected_to_channel(client, app):
    with client.websocket_connect(f"/ws?token={_token()}&channelId=7") as ws:
        hello = ws.receive_json()
        registry = app.state.registry
        members = registry.bucket_for(channel_key(7))

    assert hello == {"event": "connected", "data": {"channelId": 7, "userId": EMPLOYEE_ID}}
    assert len(members) == 1


@pytest.mark.parametrize("raw", [None, "abc", "0", "-3"])
def test_global_only_connection(client, app, raw):
    query = f"/ws?token={_token()}" + (f"&channelId={raw}" if raw is not None else "")
    with client.websocket_connect(query) as ws:
        hello = ws.receive_json()
        members = app.state.registry.bucket_for(GLOBAL_KEY)

    assert hello["data"]["channelId"] is None
    assert len(members) == 1


def test_inbound_frames_are_unsupported(client):
    with client.websocket_connect(f"/ws?token={_token()}") as ws:
        ws.receive_json()
        ws.send_text('{"event": "message:new"}')
        reply = ws.receive_json()

    assert reply == {"event": "error", "data": {"code": "unsupported"}}


@pytest.mark.parametrize("query", ["channelId=7", ""])
def test_disconnect_removes_connection_from_registry(client, app, query):
    registry = app.state.registry
    with client.websocket_connect(f"/ws?token={_token()}&{query}") as ws:
        ws.receive_json()
        assert registry.connection_count == 1

    assert registry.connection_count == 0
    assert registry.bucket_count == 0


def test_rejected_handshake_never_registers(client, app):
    with client.websocket_connect("/ws?token=garbage") as ws:
        with pytest.raises(WebSocketDisconnect):
            ws.receive_text()

    assert app.state.registry.connection_count == 0
