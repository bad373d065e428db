"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize ``value`` so it is expressed in UTC.

    Naive values are assumed to already be UTC, which is how they are written.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_epoch_ms(value: datetime) -> int:
    """Return ``value`` as integer milliseconds since the Unix epoch."""

    localized = ensure_utc(value)
    if localized is None:  # pragma: no cover
        msg = "Failed to convert datetime to epoch milliseconds"
        raise RuntimeError(msg)
    return int(localized.timestamp() * 1000)


def from_epoch_ms(value: int | float) -> datetime:
    """Inverse of :func:`to_epoch_ms`."""

    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def isoformat_utc(value: datetime) -> str:
    """Return an ISO-8601 string with a ``Z`` suffix, as browsers emit it."""

    localized = ensure_utc(value)
    if localized is None:  # pragma: no cover
        msg = "Failed to format datetime"
        raise RuntimeError(msg)
    return localized.isoformat(timespec="milliseconds").replace("+00:00", "Z")
