"""Application use cases for the inbox service."""

from .email_verification import (
    clear_email,
    get_email_record,
    get_email_state,
    get_verified_email,
    render_verification_email,
    resend_verification,
    set_email,
    verify_email,
)
from .fan_out import DeliveryOutcome, DispatchReport, dispatch_event, serialize_feed_item
from .feed import add_feed_item, clear_feed_items, list_feed_items
from .inbox_config import (
    ConfigUpdate,
    InboxConfig,
    PushAction,
    get_inbox_config,
    update_inbox_config,
)
from .mutation_gate import AuthorizedRequest, authorize_request, get_expected_nonce
from .permissions import (
    PermissionGate,
    allowed_channels,
    allowed_channels_table,
    get_type_configs,
    update_type_configs,
)
from .push_subscriptions import (
    count_subscriptions,
    is_subscribed,
    list_subscriptions,
    subscribe,
    unsubscribe,
    unsubscribe_all,
)

__all__ = [
    "AuthorizedRequest",
    "ConfigUpdate",
    "DeliveryOutcome",
    "DispatchReport",
    "InboxConfig",
    "PermissionGate",
    "PushAction",
    "add_feed_item",
    "allowed_channels",
    "allowed_channels_table",
    "authorize_request",
    "clear_email",
    "clear_feed_items",
    "count_subscriptions",
    "dispatch_event",
    "get_email_record",
    "get_email_state",
    "get_expected_nonce",
    "get_inbox_config",
    "get_type_configs",
    "get_verified_email",
    "is_subscribed",
    "list_feed_items",
    "list_subscriptions",
    "render_verification_email",
    "resend_verification",
    "serialize_feed_item",
    "set_email",
    "subscribe",
    "unsubscribe",
    "unsubscribe_all",
    "update_inbox_config",
    "update_type_configs",
    "verify_email",
]
