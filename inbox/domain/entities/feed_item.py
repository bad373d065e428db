"""Domain entity representing a persisted inbox feed item."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FeedItem:
    """Event recorded in the feed of a single identity.

    ``id`` is ``{type}/{unique suffix}`` so listing can filter by type prefix.
    """

    id: str
    data: Any
    timestamp: str | None = None
    chain_id: str | None = None

    @property
    def type(self) -> str:
        return self.id.split("/", 1)[0]


__all__ = ["FeedItem"]
