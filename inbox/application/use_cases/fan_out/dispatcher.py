"""Fan an accepted event out to the feed, realtime listeners, email and push.

Every outbound call is bounded by the configured timeout and isolated: a
failing send is logged with its recipient, event, channel and payload and
never affects sibling sends or the caller's response.
"""

from __future__ import annotations

import functools
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import anyio
from anyio import to_thread
from sqlalchemy.orm import Session

from inbox.domain.entities import Channel, FeedItem, InboxEvent
from inbox.domain.errors import DownstreamDispatchError, SubscriptionGoneError
from inbox.infrastructure.channels import DeliveryChannels
from inbox.infrastructure.email import EmailMessage
from inbox.infrastructure.notifications import ITEM_ADDED_EVENT

from ..email_verification import get_verified_email
from ..feed import add_feed_item
from ..permissions import PermissionGate
from ..push_subscriptions import list_subscriptions, unsubscribe
from .templates import EventTemplate, RenderContext, template_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryOutcome:
    recipient: str
    channel: Channel
    target: str
    ok: bool
    error: str | None = None


@dataclass
class DispatchReport:
    """What happened to one event; used for logging, never for control flow."""

    owner: str
    item: FeedItem | None = None
    recipients: set[str] = field(default_factory=set)
    outcomes: list[DeliveryOutcome] = field(default_factory=list)
    skipped: list[tuple[str, Channel]] = field(default_factory=list)
    removed_subscriptions: list[tuple[str, str]] = field(default_factory=list)

    @property
    def failures(self) -> list[DeliveryOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]


@dataclass(frozen=True)
class _Delivery:
    recipient: str
    channel: Channel
    target: str
    payload: Any
    send: Callable[[], None]


def serialize_feed_item(item: FeedItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "data": item.data,
        "timestamp": item.timestamp,
        "chainId": item.chain_id,
    }


def _event_json(event: InboxEvent) -> str:
    return json.dumps(
        {"type": event.type, "data": event.data, "chainId": event.chain_id},
        default=str,
    )


def _payload_json(payload: Any) -> str:
    if isinstance(payload, EmailMessage):
        payload = {"subject": payload.subject}
    return json.dumps(payload, default=str)


async def _emit_realtime(channels: DeliveryChannels, owner: str, item: FeedItem) -> None:
    try:
        with anyio.fail_after(channels.timeout):
            await channels.realtime.publish(
                owner, event_type=ITEM_ADDED_EVENT, payload=serialize_feed_item(item)
            )
    except (DownstreamDispatchError, TimeoutError) as exc:
        logger.error("Error emitting realtime event for %s (item %s): %s", owner, item.id, exc)


async def _expand_recipients(channels: DeliveryChannels, owner: str) -> set[str]:
    try:
        with anyio.fail_after(channels.timeout):
            recipients = await channels.directory.expand(owner)
    except TimeoutError:
        logger.warning("Profile directory timed out for %s", owner)
        return {owner}
    return set(recipients) | {owner}


def _store_item(
    session: Session,
    gate: PermissionGate,
    owner: str,
    event: InboxEvent,
    timestamp: datetime | None,
) -> FeedItem | None:
    if not gate.is_enabled(owner, event.type, Channel.FEED):
        return None
    return add_feed_item(session, owner, event, timestamp=timestamp)


def _plan_email(
    session: Session,
    gate: PermissionGate,
    channels: DeliveryChannels,
    recipient: str,
    event: InboxEvent,
    template: EventTemplate | None,
    context: RenderContext,
    report: DispatchReport,
) -> list[_Delivery]:
    if channels.mailer is None:
        return []
    address = get_verified_email(session, recipient)
    if address is None or not gate.is_enabled(recipient, event.type, Channel.EMAIL):
        return []
    if template is None:
        report.skipped.append((recipient, Channel.EMAIL))
        return []

    message = template.render_email(event.data, context)
    return [
        _Delivery(
            recipient=recipient,
            channel=Channel.EMAIL,
            target=address,
            payload=message,
            send=functools.partial(channels.mailer.send, address, message),
        )
    ]


def _plan_push(
    session: Session,
    gate: PermissionGate,
    channels: DeliveryChannels,
    recipient: str,
    event: InboxEvent,
    template: EventTemplate | None,
    context: RenderContext,
    report: DispatchReport,
) -> list[_Delivery]:
    if channels.push_sender is None:
        return []
    subscriptions = list_subscriptions(session, recipient)
    if not subscriptions or not gate.is_enabled(recipient, event.type, Channel.PUSH):
        return []
    if template is None:
        report.skipped.append((recipient, Channel.PUSH))
        return []

    payload = template.render_push(event.data, context)
    return [
        _Delivery(
            recipient=recipient,
            channel=Channel.PUSH,
            target=subscription.key,
            payload=payload,
            send=functools.partial(channels.push_sender.send, subscription, payload),
        )
        for subscription in subscriptions
    ]


def _plan_deliveries(
    session: Session,
    gate: PermissionGate,
    channels: DeliveryChannels,
    event: InboxEvent,
    report: DispatchReport,
) -> list[_Delivery]:
    template = template_for(event.type, event.data)
    context = RenderContext(
        app_base_url=channels.app_base_url,
        ipfs_gateway_url=channels.ipfs_gateway_url,
        default_image_url=channels.default_image_url,
    )

    deliveries: list[_Delivery] = []
    for recipient in sorted(report.recipients):
        deliveries.extend(
            _plan_email(session, gate, channels, recipient, event, template, context, report)
        )
        deliveries.extend(
            _plan_push(session, gate, channels, recipient, event, template, context, report)
        )
    return deliveries


def _remove_gone(session: Session, gone: list[_Delivery], report: DispatchReport) -> None:
    for delivery in gone:
        unsubscribe(session, delivery.recipient, delivery.target)
        report.removed_subscriptions.append((delivery.recipient, delivery.target))


async def _deliver(
    delivery: _Delivery,
    event: InboxEvent,
    timeout: float,
    outcomes: list[DeliveryOutcome],
    gone: list[_Delivery],
) -> None:
    error: str | None = None
    try:
        with anyio.fail_after(timeout):
            await to_thread.run_sync(delivery.send, abandon_on_cancel=True)
    except SubscriptionGoneError as exc:
        gone.append(delivery)
        error = str(exc)
        logger.warning(
            "Push subscription %s of %s is gone: %s", delivery.target, delivery.recipient, exc
        )
    except (DownstreamDispatchError, TimeoutError) as exc:
        error = str(exc) or "Timed out"
        logger.error(
            "Error sending %s notification to %s (%s) for event %s with payload %s: %s",
            delivery.channel.name,
            delivery.recipient,
            delivery.target,
            _event_json(event),
            _payload_json(delivery.payload),
            error,
        )
    except Exception as exc:
        error = repr(exc)
        logger.exception(
            "Unexpected error sending %s notification to %s (%s) for event %s with payload %s",
            delivery.channel.name,
            delivery.recipient,
            delivery.target,
            _event_json(event),
            _payload_json(delivery.payload),
        )
    outcomes.append(
        DeliveryOutcome(
            recipient=delivery.recipient,
            channel=delivery.channel,
            target=delivery.target,
            ok=error is None,
            error=error,
        )
    )


async def dispatch_event(
    session: Session,
    channels: DeliveryChannels,
    owner: str,
    event: InboxEvent,
    *,
    timestamp: datetime | None = None,
) -> DispatchReport:
    """Record ``event`` for ``owner`` and notify every linked recipient.

    Only the feed write can raise. All sends are awaited before returning.
    Session work runs in a worker thread so the event loop stays free.
    """

    gate = PermissionGate(session)
    report = DispatchReport(owner=owner)

    report.item = await to_thread.run_sync(
        _store_item, session, gate, owner, event, timestamp
    )
    if report.item is not None:
        await _emit_realtime(channels, owner, report.item)

    report.recipients = await _expand_recipients(channels, owner)

    deliveries = await to_thread.run_sync(
        _plan_deliveries, session, gate, channels, event, report
    )

    if report.skipped:
        logger.info(
            "Event %s lacks the fields its template needs; skipped %d deliveries",
            event.type,
            len(report.skipped),
        )

    gone: list[_Delivery] = []
    async with anyio.create_task_group() as task_group:
        for delivery in deliveries:
            task_group.start_soon(
                _deliver, delivery, event, channels.timeout, report.outcomes, gone
            )

    if gone:
        await to_thread.run_sync(_remove_gone, session, gone, report)

    logger.info(
        "Dispatched %s for %s: stored=%s recipients=%d sent=%d failed=%d",
        event.type,
        owner,
        report.item is not None,
        len(report.recipients),
        len(report.outcomes) - len(report.failures),
        len(report.failures),
    )
    return report


__all__ = [
    "DeliveryOutcome",
    "DispatchReport",
    "dispatch_event",
    "serialize_feed_item",
]
