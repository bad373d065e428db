"""FastAPI dependency utilities."""

from __future__ import annotations

import json

from fastapi import Depends, Header, Request
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from inbox.application.use_cases import AuthorizedRequest, authorize_request
from inbox.config import get_settings
from inbox.domain.errors import AuthError, ValidationError
from inbox.infrastructure.channels import DeliveryChannels
from inbox.infrastructure.database import get_db
from inbox.infrastructure.security import Adr36SignatureVerifier, SignatureVerifier
from inbox.interfaces.api.schemas import SignedRequest


def get_delivery_channels(request: Request) -> DeliveryChannels:
    """Return the transports built when the application started."""

    return request.app.state.channels


def get_signature_verifier() -> SignatureVerifier:
    return Adr36SignatureVerifier()


def require_webhook_secret(x_api_key: str | None = Header(default=None)) -> None:
    """Ensure the caller presented the shared webhook secret."""

    secret = get_settings().add_secret
    if not secret or x_api_key != secret:
        raise AuthError("Invalid API key")


async def require_signed_request(
    request: Request,
    db: Session = Depends(get_db),
    verifier: SignatureVerifier = Depends(get_signature_verifier),
) -> AuthorizedRequest:
    """Verify the signed body and consume its nonce.

    The signature covers ``data`` exactly as the client serialized it, so the
    raw decoded body is verified rather than a re-serialized model.
    """

    try:
        body = json.loads(await request.body())
    except ValueError as exc:
        raise ValidationError("Invalid request body") from exc

    try:
        signed = SignedRequest.model_validate(body)
    except PydanticValidationError as exc:
        raise ValidationError("Invalid auth body.") from exc

    return authorize_request(db, verifier, body["data"], signed.signature)


__all__ = [
    "get_delivery_channels",
    "get_signature_verifier",
    "require_signed_request",
    "require_webhook_secret",
]
