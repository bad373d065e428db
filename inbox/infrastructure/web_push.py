"""Web Push delivery with VAPID authentication."""

from __future__ import annotations

import json
import logging
from typing import Any

from pywebpush import WebPushException, webpush

from inbox.config import Settings
from inbox.domain.entities import PushSubscription
from inbox.domain.errors import DownstreamDispatchError, SubscriptionGoneError

logger = logging.getLogger(__name__)

# Push services answer these for unsubscribed or expired endpoints.
GONE_STATUS_CODES = frozenset({404, 410})


class WebPushSender:
    def __init__(self, private_key: str, subject: str, *, timeout: float | None = None) -> None:
        self._private_key = private_key
        self._subject = subject
        self._timeout = timeout

    def send(self, subscription: PushSubscription, payload: dict[str, Any]) -> None:
        subscription_info = {
            "endpoint": subscription.endpoint,
            "keys": {"p256dh": subscription.p256dh, "auth": subscription.auth},
        }
        try:
            webpush(
                subscription_info=subscription_info,
                data=json.dumps(payload),
                vapid_private_key=self._private_key,
                # pywebpush fills in ``aud`` and ``exp`` on the dict it receives.
                vapid_claims={"sub": self._subject},
                timeout=self._timeout,
            )
        except WebPushException as exc:
            status_code = getattr(exc.response, "status_code", None)
            if status_code in GONE_STATUS_CODES:
                raise SubscriptionGoneError(
                    f"Push endpoint answered {status_code}"
                ) from exc
            raise DownstreamDispatchError(
                f"Push delivery failed with status {status_code}: {exc}"
            ) from exc


def build_push_sender(settings: Settings) -> WebPushSender | None:
    """Return the process-wide push sender, or ``None`` when VAPID keys are missing."""

    if not (settings.web_push_public_key and settings.web_push_private_key):
        logger.info("VAPID keys not configured; push delivery disabled")
        return None
    return WebPushSender(
        settings.web_push_private_key,
        settings.web_push_subject,
        timeout=settings.outbound_timeout_seconds,
    )


__all__ = ["GONE_STATUS_CODES", "WebPushSender", "build_push_sender"]
