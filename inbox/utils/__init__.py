"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_utc,
    from_epoch_ms,
    isoformat_utc,
    now_utc,
    to_epoch_ms,
)

__all__ = [
    "ensure_utc",
    "from_epoch_ms",
    "isoformat_utc",
    "now_utc",
    "to_epoch_ms",
]
