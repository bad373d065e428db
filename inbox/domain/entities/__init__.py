"""Domain entities exposed by the application."""

from .channel import (
    DEFAULT_CHANNEL_ENABLED,
    TYPE_ALLOWED_CHANNELS,
    UNKNOWN_TYPE_CHANNELS,
    Channel,
    InboxItemType,
)
from .email_record import VERIFICATION_CODE_TTL, EmailRecord, EmailState
from .feed_item import FeedItem
from .inbox_event import InboxEvent
from .push_subscription import PushSubscription

__all__ = [
    "Channel",
    "InboxItemType",
    "TYPE_ALLOWED_CHANNELS",
    "UNKNOWN_TYPE_CHANNELS",
    "DEFAULT_CHANNEL_ENABLED",
    "EmailRecord",
    "EmailState",
    "VERIFICATION_CODE_TTL",
    "FeedItem",
    "InboxEvent",
    "PushSubscription",
]
