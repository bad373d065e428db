"""Process-wide delivery transports, built once when the application starts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from inbox.config import Settings
from inbox.domain.entities import PushSubscription

from .directory import ProfileDirectory, build_profile_directory
from .email import EmailMessage, build_mailer
from .notifications import RealtimeEventPublisher, build_pusher_client, inbox_connection_manager
from .web_push import build_push_sender

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send(self, recipient: str, message: EmailMessage) -> None: ...


class PushSender(Protocol):
    def send(self, subscription: PushSubscription, payload: dict[str, Any]) -> None: ...


class RealtimePublisher(Protocol):
    async def publish(self, identity: str, *, event_type: str, payload: Any) -> None: ...


class Directory(Protocol):
    async def expand(self, identity: str) -> set[str]: ...


@dataclass
class DeliveryChannels:
    """Transports used by the fan-out dispatcher and the email state machine.

    ``mailer`` and ``push_sender`` are ``None`` when not configured.
    """

    realtime: RealtimePublisher
    directory: Directory
    mailer: Mailer | None = None
    push_sender: PushSender | None = None
    timeout: float = 10.0
    app_base_url: str = "https://daodao.zone"
    ipfs_gateway_url: str = "https://nftstorage.link/ipfs/"
    default_image_url: str = "https://daodao.zone/daodao.png"
    http_client: httpx.AsyncClient | None = None

    async def aclose(self) -> None:
        if self.http_client is not None:
            await self.http_client.aclose()


def build_delivery_channels(settings: Settings) -> DeliveryChannels:
    """Create every transport from ``settings``."""

    http_client = httpx.AsyncClient(timeout=settings.outbound_timeout_seconds)
    channels = DeliveryChannels(
        realtime=RealtimeEventPublisher(
            inbox_connection_manager, build_pusher_client(settings, http_client)
        ),
        directory=build_profile_directory(settings, http_client),
        mailer=build_mailer(settings),
        push_sender=build_push_sender(settings),
        timeout=settings.outbound_timeout_seconds,
        app_base_url=settings.app_base_url.rstrip("/"),
        ipfs_gateway_url=settings.ipfs_gateway_url,
        default_image_url=settings.default_image_url,
        http_client=http_client,
    )
    logger.info(
        "Delivery channels ready (email=%s, push=%s)",
        channels.mailer is not None,
        channels.push_sender is not None,
    )
    return channels


__all__ = [
    "DeliveryChannels",
    "Directory",
    "Mailer",
    "PushSender",
    "RealtimePublisher",
    "ProfileDirectory",
    "build_delivery_channels",
]
