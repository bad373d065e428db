"""Tests for the realtime websocket stream."""

from __future__ import annotations

import pytest
from starlette.websockets import WebSocketDisconnect

from conftest import ADD_SECRET, Wallet
from inbox.infrastructure.notifications import RealtimeEventPublisher, inbox_connection_manager


def test_websocket_answers_ping(client, wallet: Wallet) -> None:
    with client.websocket_connect(f"/ws/{wallet.identity}") as websocket:
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    assert inbox_connection_manager.connection_count(wallet.identity) == 0


def test_websocket_rejects_invalid_identity(client) -> None:
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/ws/not-a-hash") as websocket:
            websocket.receive_json()


def test_added_items_are_streamed(client, channels, wallet: Wallet) -> None:
    channels.realtime = RealtimeEventPublisher(inbox_connection_manager)

    with client.websocket_connect(f"/ws/{wallet.identity}") as websocket:
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

        response = client.post(
            "/add",
            params={"bech32Hash": wallet.identity},
            json={"type": "joined_dao", "data": {"dao": "juno1dao"}, "chainId": "juno-1"},
            headers={"x-api-key": ADD_SECRET},
        )
        assert response.status_code == 200

        event = websocket.receive_json()

    assert event["type"] == "add"
    assert event["data"]["id"].startswith("joined_dao/")
    assert event["data"]["data"] == {"dao": "juno1dao"}
    assert event["data"]["chainId"] == "juno-1"
