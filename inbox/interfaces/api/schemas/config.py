"""Schemas for the inbox configuration endpoint."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class PushSubscribeAction(BaseModel):
    type: Literal["subscribe"]
    subscription: dict[str, Any]


class PushKeyAction(BaseModel):
    type: Literal["check", "unsubscribe"]
    p256dh: str = Field(..., min_length=1)


class PushUnsubscribeAllAction(BaseModel):
    type: Literal["unsubscribe_all"]


PushActionBody = Annotated[
    Union[PushSubscribeAction, PushKeyAction, PushUnsubscribeAllAction],
    Field(discriminator="type"),
]


class ConfigData(BaseModel):
    """Changes requested by the signed ``data``; omitted fields stay untouched.

    ``email`` set to ``null`` or an empty string removes the address.
    """

    email: str | None = None
    types: dict[str, Any] | None = None
    verify: str | None = None
    resend: bool = False
    push: PushActionBody | None = None


class ConfigResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str | None
    verified: bool
    types: dict[str, int | None]
    push_subscriptions: int = Field(..., alias="pushSubscriptions")
    push_subscribed: bool | None = Field(default=None, alias="pushSubscribed")
    type_allowed_methods: dict[str, list[int]] = Field(..., alias="typeAllowedMethods")


__all__ = [
    "ConfigData",
    "ConfigResponse",
    "PushKeyAction",
    "PushSubscribeAction",
    "PushUnsubscribeAllAction",
]
