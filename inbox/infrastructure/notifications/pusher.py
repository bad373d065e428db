"""Minimal Pusher Channels REST client used to trigger realtime events."""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from typing import Any

import httpx

from inbox.config import Settings
from inbox.domain.errors import DownstreamDispatchError


def sign_query(
    *,
    key: str,
    secret: str,
    method: str,
    path: str,
    body: str | None = None,
    timestamp: int | None = None,
) -> str:
    """Return the signed query string required by the Pusher REST API."""

    params: dict[str, Any] = {
        "auth_key": key,
        "auth_timestamp": timestamp if timestamp is not None else int(time.time()),
        "auth_version": "1.0",
    }
    if body:
        params["body_md5"] = hashlib.md5(body.encode("utf-8")).hexdigest()

    query = "&".join(f"{name}={params[name]}" for name in sorted(params))
    to_sign = "\n".join((method.upper(), path, query))
    signature = hmac.new(
        secret.encode("utf-8"), to_sign.encode("utf-8"), hashlib.sha256
    ).hexdigest()
    return f"{query}&auth_signature={signature}"


class PusherClient:
    def __init__(
        self,
        *,
        host: str,
        port: int,
        app_id: str,
        key: str,
        secret: str,
        client: httpx.AsyncClient,
    ) -> None:
        self._base_url = f"https://{host}:{port}"
        self._app_id = app_id
        self._key = key
        self._secret = secret
        self._client = client

    async def trigger(self, channel: str, event: str, data: Any) -> None:
        path = f"/apps/{self._app_id}/events"
        body = json.dumps({"name": event, "data": json.dumps(data), "channels": [channel]})
        query = sign_query(
            key=self._key, secret=self._secret, method="POST", path=path, body=body
        )
        try:
            response = await self._client.post(
                f"{self._base_url}{path}?{query}",
                content=body,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise DownstreamDispatchError(f"Pusher trigger failed: {exc}") from exc


def build_pusher_client(settings: Settings, client: httpx.AsyncClient) -> PusherClient | None:
    if not settings.pusher_enabled:
        return None
    return PusherClient(
        host=settings.pusher_host or "",
        port=settings.pusher_port or 443,
        app_id=settings.pusher_app_id or "",
        key=settings.pusher_app_key or "",
        secret=settings.pusher_secret or "",
        client=client,
    )


__all__ = ["PusherClient", "build_pusher_client", "sign_query"]
