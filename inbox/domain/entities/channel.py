"""Delivery channels and the event types that may use them."""

from __future__ import annotations

from enum import Enum, IntFlag


class Channel(IntFlag):
    """Bits of the per-type channel mask stored for each identity."""

    FEED = 1 << 0
    EMAIL = 1 << 1
    PUSH = 1 << 2


class InboxItemType(str, Enum):
    JOINED_DAO = "joined_dao"
    PROPOSAL_CREATED = "proposal_created"
    PROPOSAL_EXECUTED = "proposal_executed"
    PROPOSAL_CLOSED = "proposal_closed"


TYPE_ALLOWED_CHANNELS: dict[str, frozenset[Channel]] = {
    InboxItemType.JOINED_DAO.value: frozenset(
        {Channel.FEED, Channel.EMAIL, Channel.PUSH}
    ),
    InboxItemType.PROPOSAL_CREATED.value: frozenset(
        {Channel.FEED, Channel.EMAIL, Channel.PUSH}
    ),
    InboxItemType.PROPOSAL_EXECUTED.value: frozenset({Channel.EMAIL, Channel.PUSH}),
    InboxItemType.PROPOSAL_CLOSED.value: frozenset({Channel.EMAIL, Channel.PUSH}),
}

# Types missing from the table are kept in the feed and never emailed or pushed.
UNKNOWN_TYPE_CHANNELS: frozenset[Channel] = frozenset({Channel.FEED})

# Applied when an identity has never stored a mask for a type.
DEFAULT_CHANNEL_ENABLED = True


__all__ = [
    "Channel",
    "InboxItemType",
    "TYPE_ALLOWED_CHANNELS",
    "UNKNOWN_TYPE_CHANNELS",
    "DEFAULT_CHANNEL_ENABLED",
]
