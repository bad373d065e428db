"""Use cases for the Web Push subscription registry."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy.orm import Session

from inbox.domain.entities import PushSubscription
from inbox.domain.errors import ValidationError
from inbox.infrastructure.repositories import PushSubscriptionRepository


def subscribe(session: Session, identity: str, subscription: Any) -> PushSubscription:
    """Register ``subscription``; registering the same key twice keeps one record."""

    parsed = (
        subscription
        if isinstance(subscription, PushSubscription)
        else PushSubscription.from_dict(subscription)
    )
    if parsed is None:
        raise ValidationError("Invalid push subscription.")
    PushSubscriptionRepository(session).save(identity, parsed)
    return parsed


def unsubscribe(session: Session, identity: str, subscription_key: str) -> None:
    PushSubscriptionRepository(session).delete(identity, subscription_key)


def unsubscribe_all(session: Session, identity: str) -> None:
    PushSubscriptionRepository(session).delete_all(identity)


def is_subscribed(session: Session, identity: str, subscription_key: str) -> bool:
    return PushSubscriptionRepository(session).exists(identity, subscription_key)


def list_subscriptions(session: Session, identity: str) -> Sequence[PushSubscription]:
    """Return the well-formed subscriptions; malformed records are skipped."""

    return PushSubscriptionRepository(session).list_for_identity(identity)


def count_subscriptions(session: Session, identity: str) -> int:
    """Number of deliverable subscriptions, matching :func:`list_subscriptions`."""

    return len(PushSubscriptionRepository(session).list_for_identity(identity))


__all__ = [
    "count_subscriptions",
    "is_subscribed",
    "list_subscriptions",
    "subscribe",
    "unsubscribe",
    "unsubscribe_all",
]
