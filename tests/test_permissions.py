"""Tests for the per-type channel permission gate."""

from __future__ import annotations

import pytest

from inbox.application.use_cases import (
    PermissionGate,
    allowed_channels,
    allowed_channels_table,
    get_type_configs,
    update_type_configs,
)
from inbox.domain.entities import Channel
from inbox.domain.errors import ValidationError
from inbox.infrastructure.kv_store import KeyValueStore

OWNER = "33" * 20


def test_unset_mask_enables_every_allowed_channel(session) -> None:
    gate = PermissionGate(session)

    assert gate.enabled_channels(OWNER, "joined_dao") == {
        Channel.FEED,
        Channel.EMAIL,
        Channel.PUSH,
    }
    assert gate.enabled_channels(OWNER, "proposal_executed") == {
        Channel.EMAIL,
        Channel.PUSH,
    }


def test_stored_mask_limits_channels(session) -> None:
    update_type_configs(session, OWNER, {"proposal_created": int(Channel.FEED | Channel.PUSH)})
    gate = PermissionGate(session)

    assert gate.is_enabled(OWNER, "proposal_created", Channel.FEED)
    assert gate.is_enabled(OWNER, "proposal_created", Channel.PUSH)
    assert not gate.is_enabled(OWNER, "proposal_created", Channel.EMAIL)


def test_channel_outside_allow_list_is_never_enabled(session) -> None:
    update_type_configs(session, OWNER, {"proposal_closed": 7})

    assert not PermissionGate(session).is_enabled(OWNER, "proposal_closed", Channel.FEED)


def test_unknown_types_only_reach_the_feed(session) -> None:
    gate = PermissionGate(session)

    assert allowed_channels("dao_renamed") == {Channel.FEED}
    assert gate.is_enabled(OWNER, "dao_renamed", Channel.FEED)
    assert not gate.is_enabled(OWNER, "dao_renamed", Channel.EMAIL)


def test_non_numeric_stored_mask_falls_back_to_default(session) -> None:
    KeyValueStore(session).put(f"TYPE:{OWNER}:joined_dao", "everything")

    assert PermissionGate(session).is_enabled(OWNER, "joined_dao", Channel.EMAIL)
    assert get_type_configs(session, OWNER) == {"joined_dao": None}


def test_zero_mask_disables_the_type(session) -> None:
    update_type_configs(session, OWNER, {"joined_dao": 0})

    assert PermissionGate(session).enabled_channels(OWNER, "joined_dao") == frozenset()
    assert get_type_configs(session, OWNER) == {"joined_dao": 0}


@pytest.mark.parametrize(
    "types",
    [
        {"joined_dao": -1},
        {"joined_dao": "3"},
        {"joined_dao": True},
        {"a:b": 1},
        {"a/b": 1},
        ["joined_dao"],
    ],
)
def test_invalid_masks_are_rejected(session, types) -> None:
    with pytest.raises(ValidationError):
        update_type_configs(session, OWNER, types)


def test_allowed_channels_table_lists_bits() -> None:
    table = allowed_channels_table()

    assert table["joined_dao"] == [1, 2, 4]
    assert table["proposal_closed"] == [2, 4]
