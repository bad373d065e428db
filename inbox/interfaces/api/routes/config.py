"""Signed configuration endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from inbox.application.use_cases import (
    AuthorizedRequest,
    ConfigUpdate,
    PushAction,
    update_inbox_config,
)
from inbox.domain.errors import ValidationError
from inbox.infrastructure.channels import DeliveryChannels
from inbox.infrastructure.database import get_db
from inbox.interfaces.api.dependencies import get_delivery_channels, require_signed_request
from inbox.interfaces.api.schemas import (
    ConfigData,
    ConfigResponse,
    PushKeyAction,
    PushSubscribeAction,
)

router = APIRouter(tags=["config"])


def _to_update(data: ConfigData) -> ConfigUpdate:
    push = None
    if isinstance(data.push, PushSubscribeAction):
        push = PushAction(type=data.push.type, subscription=data.push.subscription)
    elif isinstance(data.push, PushKeyAction):
        push = PushAction(type=data.push.type, p256dh=data.push.p256dh)
    elif data.push is not None:
        push = PushAction(type=data.push.type)

    return ConfigUpdate(
        email=data.email,
        email_provided="email" in data.model_fields_set,
        types=data.types,
        verify=data.verify,
        resend=data.resend,
        push=push,
    )


@router.post(
    "/config",
    response_model=ConfigResponse,
    response_model_exclude_unset=True,
)
def update_config(
    authorized: AuthorizedRequest = Depends(require_signed_request),
    db: Session = Depends(get_db),
    channels: DeliveryChannels = Depends(get_delivery_channels),
) -> ConfigResponse:
    """Apply the requested changes and return the resulting settings."""

    try:
        data = ConfigData.model_validate(authorized.data)
    except PydanticValidationError as exc:
        raise ValidationError("Invalid request body") from exc

    config = update_inbox_config(db, channels, authorized.identity, _to_update(data))

    fields = {
        "email": config.email,
        "verified": config.verified,
        "types": config.types,
        "push_subscriptions": config.push_subscriptions,
        "type_allowed_methods": config.type_allowed_methods,
    }
    if config.push_subscribed is not None:
        fields["push_subscribed"] = config.push_subscribed
    return ConfigResponse(**fields)
