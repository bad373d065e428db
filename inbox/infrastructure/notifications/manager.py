"""Websocket pools keyed by identity for the realtime inbox stream."""

from __future__ import annotations

import logging
from typing import Any

import anyio
from fastapi import WebSocket
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)

# Close code sent to clients when the server shuts down.
GOING_AWAY = 1001


class InboxConnectionManager:
    """Track the open inbox websockets of each identity.

    A connection stays registered until it disconnects or a send to it fails.
    """

    def __init__(self) -> None:
        self._pools: dict[str, set[WebSocket]] = {}

    async def connect(self, identity: str, websocket: WebSocket) -> None:
        await websocket.accept()
        self._pools.setdefault(identity, set()).add(websocket)
        logger.debug("Websocket opened for %s (%d open)", identity, self.connection_count(identity))

    def disconnect(self, identity: str, websocket: WebSocket) -> None:
        pool = self._pools.get(identity)
        if not pool:
            return
        pool.discard(websocket)
        if not pool:
            del self._pools[identity]

    def connection_count(self, identity: str) -> int:
        return len(self._pools.get(identity, ()))

    async def send_to_identity(self, identity: str, message: dict[str, Any]) -> int:
        """Send ``message`` to every socket of ``identity`` concurrently.

        Sockets that fail are dropped from the pool. Returns how many
        sockets received the message.
        """

        delivered = 0

        async def _send(websocket: WebSocket) -> None:
            nonlocal delivered
            try:
                await websocket.send_json(message)
            except Exception:
                logger.debug("Dropping closed websocket for %s", identity, exc_info=True)
                self.disconnect(identity, websocket)
            else:
                delivered += 1

        async with anyio.create_task_group() as task_group:
            for websocket in list(self._pools.get(identity, ())):
                task_group.start_soon(_send, websocket)
        return delivered

    async def close_all(self) -> None:
        """Close every open socket; used when the application shuts down."""

        pools, self._pools = self._pools, {}
        for identity, pool in pools.items():
            for websocket in pool:
                if websocket.client_state is not WebSocketState.CONNECTED:
                    continue
                try:
                    await websocket.close(code=GOING_AWAY)
                except RuntimeError:
                    logger.debug("Websocket for %s already closed", identity, exc_info=True)


inbox_connection_manager = InboxConnectionManager()


__all__ = ["GOING_AWAY", "InboxConnectionManager", "inbox_connection_manager"]
