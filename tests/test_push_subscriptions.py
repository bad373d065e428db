"""Tests for the push subscription registry."""

from __future__ import annotations

import pytest

from conftest import make_subscription
from inbox.application.use_cases import (
    count_subscriptions,
    is_subscribed,
    list_subscriptions,
    subscribe,
    unsubscribe,
    unsubscribe_all,
)
from inbox.domain.errors import ValidationError
from inbox.infrastructure.kv_store import KeyValueStore

OWNER = "55" * 20


def test_subscribe_is_idempotent_per_key(session) -> None:
    subscribe(session, OWNER, make_subscription("phone"))
    updated = dict(make_subscription("phone"), endpoint="https://push.example.com/new")
    subscribe(session, OWNER, updated)

    (subscription,) = list_subscriptions(session, OWNER)
    assert subscription.endpoint == "https://push.example.com/new"
    assert is_subscribed(session, OWNER, "phone")


def test_unsubscribe_single_and_all(session) -> None:
    for key in ("phone", "laptop", "tablet"):
        subscribe(session, OWNER, make_subscription(key))

    unsubscribe(session, OWNER, "phone")
    assert not is_subscribed(session, OWNER, "phone")
    assert count_subscriptions(session, OWNER) == 2

    unsubscribe_all(session, OWNER)
    assert list_subscriptions(session, OWNER) == []
    assert count_subscriptions(session, OWNER) == 0


def test_unsubscribe_unknown_key_is_a_no_op(session) -> None:
    unsubscribe(session, OWNER, "missing")
    assert count_subscriptions(session, OWNER) == 0


@pytest.mark.parametrize(
    "raw",
    [
        None,
        {"endpoint": "https://push.example.com"},
        {"endpoint": "", "keys": {"p256dh": "k", "auth": "a"}},
        {"endpoint": "https://push.example.com", "keys": {"p256dh": "k"}},
    ],
)
def test_malformed_subscriptions_are_rejected(session, raw) -> None:
    with pytest.raises(ValidationError):
        subscribe(session, OWNER, raw)


def test_malformed_stored_records_are_skipped(session) -> None:
    subscribe(session, OWNER, make_subscription("phone"))
    store = KeyValueStore(session)
    store.put(f"PUSH:{OWNER}:broken", "{not json")
    store.put(f"PUSH:{OWNER}:partial", '{"endpoint": "https://push.example.com"}')

    assert [subscription.key for subscription in list_subscriptions(session, OWNER)] == ["phone"]


def test_count_matches_the_deliverable_subscriptions(session) -> None:
    subscribe(session, OWNER, make_subscription("phone"))
    KeyValueStore(session).put(f"PUSH:{OWNER}:broken", "{not json")

    assert count_subscriptions(session, OWNER) == 1
    assert count_subscriptions(session, OWNER) == len(list_subscriptions(session, OWNER))
