"""Helpers to broadcast realtime inbox events to connected clients."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any

from .manager import InboxConnectionManager
from .pusher import PusherClient

logger = logging.getLogger(__name__)

ITEM_ADDED_EVENT = "add"


def inbox_channel(identity: str) -> str:
    """Name of the per-identity realtime channel."""

    return f"inbox_{identity}"


class RealtimeEventPublisher:
    """Dispatch structured realtime events to websocket and Pusher subscribers."""

    def __init__(
        self,
        manager: InboxConnectionManager,
        pusher: PusherClient | None = None,
    ) -> None:
        self._manager = manager
        self._pusher = pusher
        self._pending: set[asyncio.Task[int]] = set()

    async def publish(self, identity: str, *, event_type: str, payload: Any) -> None:
        """Deliver an ``event_type`` event to listeners of ``identity``.

        Local websockets are scheduled without waiting; the Pusher trigger is
        awaited and raises :class:`DownstreamDispatchError` on failure.
        """

        message = {"type": event_type, "data": copy.deepcopy(payload)}
        self._schedule_send(identity, message)
        if self._pusher is not None:
            await self._pusher.trigger(inbox_channel(identity), event_type, payload)

    def _schedule_send(self, identity: str, message: dict[str, Any]) -> None:
        if not self._manager.connection_count(identity):
            return
        task = asyncio.get_running_loop().create_task(
            self._manager.send_to_identity(identity, message)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


__all__ = [
    "ITEM_ADDED_EVENT",
    "RealtimeEventPublisher",
    "inbox_channel",
]
