"""Persistence helpers for Web Push subscriptions."""

from __future__ import annotations

import json
from collections.abc import Sequence

from sqlalchemy.orm import Session

from inbox.domain.entities import PushSubscription
from inbox.infrastructure.keys import push_key
from inbox.infrastructure.kv_store import KeyValueStore


class PushSubscriptionRepository:
    """Set of push endpoints registered per identity."""

    def __init__(self, session: Session) -> None:
        self.store = KeyValueStore(session)

    def keys(self, identity: str) -> list[str]:
        return list(self.store.iter_keys(push_key(identity, "")))

    def list_for_identity(self, identity: str) -> Sequence[PushSubscription]:
        subscriptions = (
            PushSubscription.from_dict(self.store.get_json(key))
            for key in self.keys(identity)
        )
        return [subscription for subscription in subscriptions if subscription is not None]

    def save(self, identity: str, subscription: PushSubscription) -> None:
        self.store.put(
            push_key(identity, subscription.key), json.dumps(subscription.to_dict())
        )

    def exists(self, identity: str, subscription_key: str) -> bool:
        return self.store.get_json(push_key(identity, subscription_key)) is not None

    def delete(self, identity: str, subscription_key: str) -> None:
        self.store.delete(push_key(identity, subscription_key))

    def delete_all(self, identity: str) -> None:
        for key in self.keys(identity):
            self.store.delete(key)


__all__ = ["PushSubscriptionRepository"]
