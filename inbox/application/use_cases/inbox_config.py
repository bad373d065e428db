"""Apply a signed configuration update and report the resulting settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from inbox.domain.entities import EmailState
from inbox.domain.errors import ValidationError
from inbox.infrastructure.channels import DeliveryChannels

from .email_verification import (
    clear_email,
    get_email_record,
    resend_verification,
    set_email,
    verify_email,
)
from .permissions import allowed_channels_table, get_type_configs, update_type_configs
from .push_subscriptions import (
    count_subscriptions,
    is_subscribed,
    subscribe,
    unsubscribe,
    unsubscribe_all,
)

logger = logging.getLogger(__name__)

PUSH_ACTIONS = frozenset({"subscribe", "check", "unsubscribe", "unsubscribe_all"})


@dataclass(frozen=True)
class PushAction:
    type: str
    subscription: dict[str, Any] | None = None
    p256dh: str | None = None


@dataclass(frozen=True)
class ConfigUpdate:
    """Requested changes. ``email_provided`` separates "clear" from "leave as is"."""

    email: str | None = None
    email_provided: bool = False
    types: dict[str, Any] | None = None
    verify: str | None = None
    resend: bool = False
    push: PushAction | None = None


@dataclass(frozen=True)
class InboxConfig:
    email: str | None
    verified: bool
    types: dict[str, int | None] = field(default_factory=dict)
    push_subscriptions: int = 0
    push_subscribed: bool | None = None
    type_allowed_methods: dict[str, list[int]] = field(default_factory=dict)


def _apply_push_action(session: Session, identity: str, action: PushAction) -> bool:
    if action.type not in PUSH_ACTIONS:
        raise ValidationError("Invalid push action.")

    if action.type == "subscribe":
        subscribe(session, identity, action.subscription)
        return True
    if action.type == "unsubscribe_all":
        unsubscribe_all(session, identity)
        return False

    if not action.p256dh:
        raise ValidationError("Invalid push action.")
    if action.type == "check":
        return is_subscribed(session, identity, action.p256dh)
    unsubscribe(session, identity, action.p256dh)
    return False


def get_inbox_config(session: Session, identity: str) -> InboxConfig:
    record = get_email_record(session, identity)
    return InboxConfig(
        email=record.address if record is not None else None,
        verified=record is not None and record.state is EmailState.VERIFIED,
        types=get_type_configs(session, identity),
        push_subscriptions=count_subscriptions(session, identity),
        type_allowed_methods=allowed_channels_table(),
    )


def update_inbox_config(
    session: Session,
    channels: DeliveryChannels,
    identity: str,
    update: ConfigUpdate,
    *,
    now: datetime | None = None,
) -> InboxConfig:
    """Apply ``update`` in order: email, types, verification, push, resend.

    Verification failures propagate after the earlier steps were stored.
    """

    new_email = update.email if update.email_provided else None
    if update.email_provided:
        if new_email:
            set_email(session, channels, identity, new_email, now=now)
        else:
            clear_email(session, identity)

    if update.types is not None:
        update_type_configs(session, identity, update.types)

    if update.verify:
        verify_email(session, identity, update.verify, now=now)

    push_subscribed = None
    if update.push is not None:
        push_subscribed = _apply_push_action(session, identity, update.push)

    # A freshly set address already had its verification email sent.
    if update.resend and not new_email:
        if resend_verification(session, channels, identity, now=now) is not None:
            logger.info("Re-issued verification code for %s", identity)

    config = get_inbox_config(session, identity)
    return InboxConfig(
        email=config.email,
        verified=config.verified,
        types=config.types,
        push_subscriptions=config.push_subscriptions,
        push_subscribed=push_subscribed,
        type_allowed_methods=config.type_allowed_methods,
    )


__all__ = [
    "ConfigUpdate",
    "InboxConfig",
    "PushAction",
    "get_inbox_config",
    "update_inbox_config",
]
