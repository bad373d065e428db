"""Which delivery channels an identity receives for an event type."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from inbox.domain.entities import (
    DEFAULT_CHANNEL_ENABLED,
    TYPE_ALLOWED_CHANNELS,
    UNKNOWN_TYPE_CHANNELS,
    Channel,
)
from inbox.infrastructure.repositories import TypeConfigRepository

from .validators import ensure_channel_masks


def allowed_channels(item_type: str) -> frozenset[Channel]:
    """Channels offered for ``item_type`` regardless of identity settings."""

    return TYPE_ALLOWED_CHANNELS.get(item_type, UNKNOWN_TYPE_CHANNELS)


def allowed_channels_table() -> dict[str, list[int]]:
    """Serializable view of the allow-list, as advertised to clients."""

    return {
        item_type: sorted(int(channel) for channel in channels)
        for item_type, channels in TYPE_ALLOWED_CHANNELS.items()
    }


class PermissionGate:
    """Combine the static allow-list with each identity's stored masks."""

    def __init__(self, session: Session) -> None:
        self.repository = TypeConfigRepository(session)

    def is_enabled(self, identity: str, item_type: str, channel: Channel) -> bool:
        if channel not in allowed_channels(item_type):
            return False

        mask = self.repository.get(identity, item_type)
        if mask is None:
            return DEFAULT_CHANNEL_ENABLED
        return (mask & channel) == channel

    def enabled_channels(self, identity: str, item_type: str) -> frozenset[Channel]:
        return frozenset(
            channel
            for channel in allowed_channels(item_type)
            if self.is_enabled(identity, item_type, channel)
        )


def get_type_configs(session: Session, identity: str) -> dict[str, int | None]:
    """Return every stored ``{type: mask}`` for ``identity``."""

    return TypeConfigRepository(session).list_for_identity(identity)


def update_type_configs(
    session: Session, identity: str, types: Any
) -> dict[str, int]:
    """Validate and store channel masks; returns what was written."""

    masks = ensure_channel_masks(types)
    repository = TypeConfigRepository(session)
    for item_type, mask in masks.items():
        repository.set(identity, item_type, mask)
    return masks


__all__ = [
    "PermissionGate",
    "allowed_channels",
    "allowed_channels_table",
    "get_type_configs",
    "update_type_configs",
]
