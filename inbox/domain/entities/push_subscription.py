"""Domain entity representing a Web Push subscription."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PushSubscription:
    """Delivery endpoint and encryption keys registered by one device."""

    endpoint: str
    p256dh: str
    auth: str
    expiration_time: int | None = None

    @property
    def key(self) -> str:
        """Registry key; re-subscribing with the same key replaces the record."""

        return self.p256dh

    @classmethod
    def from_dict(cls, value: Any) -> "PushSubscription | None":
        """Build a subscription from its browser JSON form, or ``None`` if malformed."""

        if not isinstance(value, dict):
            return None
        keys = value.get("keys")
        endpoint = value.get("endpoint")
        if not isinstance(keys, dict) or not isinstance(endpoint, str) or not endpoint:
            return None
        p256dh = keys.get("p256dh")
        auth = keys.get("auth")
        if not isinstance(p256dh, str) or not p256dh:
            return None
        if not isinstance(auth, str) or not auth:
            return None
        expiration_time = value.get("expirationTime")
        if not isinstance(expiration_time, int) or isinstance(expiration_time, bool):
            expiration_time = None
        return cls(
            endpoint=endpoint,
            p256dh=p256dh,
            auth=auth,
            expiration_time=expiration_time,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "endpoint": self.endpoint,
            "expirationTime": self.expiration_time,
            "keys": {"p256dh": self.p256dh, "auth": self.auth},
        }


__all__ = ["PushSubscription"]
