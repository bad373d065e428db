"""Use cases for the persisted inbox feed."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from inbox.domain.entities import FeedItem, InboxEvent
from inbox.infrastructure.repositories import FeedRepository

from .validators import ensure_item_ids, ensure_item_type


def add_feed_item(
    session: Session,
    identity: str,
    event: InboxEvent,
    *,
    timestamp: datetime | None = None,
) -> FeedItem:
    """Store ``event`` as a new item; its type must not contain `/` or `:`."""

    return FeedRepository(session).append(
        identity,
        ensure_item_type(event.type),
        event.data,
        timestamp=timestamp,
        chain_id=event.chain_id,
    )


def list_feed_items(
    session: Session,
    identity: str,
    *,
    item_type: str | None = None,
    chain_id: str | None = None,
) -> Sequence[FeedItem]:
    """Return the identity's items, optionally filtered by type and chain.

    No order is guaranteed; clients sort by ``timestamp``.
    """

    return FeedRepository(session).list_for_identity(
        identity, item_type=item_type or None, chain_id=chain_id or None
    )


def clear_feed_items(session: Session, identity: str, ids: object) -> None:
    """Delete the given item ids; ids that do not exist are ignored."""

    FeedRepository(session).delete(identity, ensure_item_ids(ids))


__all__ = ["add_feed_item", "clear_feed_items", "list_feed_items"]
