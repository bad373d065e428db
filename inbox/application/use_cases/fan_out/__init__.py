"""Multi-channel fan-out of accepted inbox events."""

from .dispatcher import DeliveryOutcome, DispatchReport, dispatch_event, serialize_feed_item
from .templates import EVENT_TEMPLATES, EventTemplate, RenderContext, resolve_image_url, template_for

__all__ = [
    "DeliveryOutcome",
    "DispatchReport",
    "EVENT_TEMPLATES",
    "EventTemplate",
    "RenderContext",
    "dispatch_event",
    "resolve_image_url",
    "serialize_feed_item",
    "template_for",
]
