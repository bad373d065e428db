"""Admit signed, nonce-bound mutation requests.

Reading the expected nonce and storing the next one are two separate
writes; two requests racing with the same nonce may both be admitted.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from inbox.domain.errors import ReplayOrStaleNonceError, ValidationError
from inbox.infrastructure.identity import public_key_to_identity
from inbox.infrastructure.repositories import NonceRepository
from inbox.infrastructure.security import SignatureVerifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthorizedRequest:
    """A request whose signature and nonce were accepted."""

    identity: str
    public_key: str
    nonce: int
    data: dict[str, Any]


def get_expected_nonce(session: Session, identity: str) -> int:
    return NonceRepository(session).get_expected(identity)


def authorize_request(
    session: Session,
    verifier: SignatureVerifier,
    data: Mapping[str, Any],
    signature: str,
) -> AuthorizedRequest:
    """Verify the signature, then consume the declared nonce."""

    auth = data.get("auth")
    if not isinstance(auth, Mapping):
        raise ValidationError("Invalid auth body.")
    public_key = auth.get("publicKey")
    nonce = auth.get("nonce")
    if not isinstance(public_key, str) or not public_key:
        raise ValidationError("Invalid auth body.")
    if isinstance(nonce, bool) or not isinstance(nonce, int):
        raise ValidationError("Invalid auth body.")

    verifier.verify(data, signature)
    identity = public_key_to_identity(public_key)

    repository = NonceRepository(session)
    expected = repository.get_expected(identity)
    if nonce != expected:
        logger.info("Rejected nonce %s for %s (expected %s)", nonce, identity, expected)
        raise ReplayOrStaleNonceError(expected, nonce)
    repository.set_expected(identity, expected + 1)

    return AuthorizedRequest(
        identity=identity, public_key=public_key, nonce=nonce, data=dict(data)
    )


__all__ = ["AuthorizedRequest", "authorize_request", "get_expected_nonce"]
