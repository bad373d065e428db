"""Websocket stream of feed items added for an identity."""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from inbox.domain.errors import ValidationError
from inbox.infrastructure.identity import normalize_identity
from inbox.infrastructure.notifications import inbox_connection_manager

router = APIRouter(tags=["realtime"])
logger = logging.getLogger(__name__)


@router.websocket("/ws/{bech32_hash}")
async def inbox_websocket(websocket: WebSocket, bech32_hash: str) -> None:
    """Stream ``add`` events for the identity; answers ``ping`` with ``pong``."""

    try:
        identity = normalize_identity(bech32_hash)
    except ValidationError:
        await websocket.close(code=1008)
        return

    await inbox_connection_manager.connect(identity, websocket)
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        logger.debug("Websocket closed for %s", identity)
    finally:
        inbox_connection_manager.disconnect(identity, websocket)
