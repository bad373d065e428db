"""Domain entity describing an event pushed by a producer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class InboxEvent:
    """Typed event accepted from the indexer webhook."""

    type: str
    data: Any = field(default_factory=dict)
    chain_id: str | None = None


__all__ = ["InboxEvent"]
