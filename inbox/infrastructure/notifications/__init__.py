"""Realtime notification helpers for the infrastructure layer."""

from .manager import GOING_AWAY, InboxConnectionManager, inbox_connection_manager
from .pusher import PusherClient, build_pusher_client, sign_query
from .realtime import (
    ITEM_ADDED_EVENT,
    RealtimeEventPublisher,
    inbox_channel,
)

__all__ = [
    "GOING_AWAY",
    "InboxConnectionManager",
    "inbox_connection_manager",
    "PusherClient",
    "build_pusher_client",
    "sign_query",
    "ITEM_ADDED_EVENT",
    "RealtimeEventPublisher",
    "inbox_channel",
]
