"""Email address state machine: unset, pending verification, verified.

Every transition is a read followed by a write on one key with no
transaction around it; two concurrent requests for the same identity can
overwrite each other and the last write wins.
"""

from __future__ import annotations

import html
import logging
import uuid
from datetime import datetime
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from inbox.domain.entities import VERIFICATION_CODE_TTL, EmailRecord, EmailState
from inbox.domain.errors import (
    DownstreamDispatchError,
    ExpiredError,
    InvalidCodeError,
    InvalidMetadataError,
    NotFoundError,
)
from inbox.infrastructure.channels import DeliveryChannels
from inbox.infrastructure.email import EmailMessage
from inbox.infrastructure.repositories import EmailRepository
from inbox.utils import now_utc

from .validators import ensure_valid_email

logger = logging.getLogger(__name__)


def _expiration_text() -> str:
    return f"{VERIFICATION_CODE_TTL.days} days"


def render_verification_email(*, url: str) -> EmailMessage:
    link = html.escape(url, quote=True)
    html_content = "".join(
        (
            "<p>Hi,</p>",
            "<p>Confirm this address to receive inbox notifications by email.</p>",
            f'<p><a href="{link}">Verify your email</a></p>',
            f"<p>This link expires in {_expiration_text()}.</p>",
            "<p>If you did not request this, you can ignore this message.</p>",
        )
    )
    return EmailMessage(subject="Verify your email", html_content=html_content)


def _verification_url(base_url: str, identity: str, code: str) -> str:
    query = urlencode({"code": code, "bech32Hash": identity})
    return f"{base_url.rstrip('/')}/inbox/verify?{query}"


def get_email_record(session: Session, identity: str) -> EmailRecord | None:
    """Return the stored record; corrupt metadata raises :class:`InvalidMetadataError`."""

    stored = EmailRepository(session).get(identity)
    return stored.to_record() if stored is not None else None


def get_email_state(session: Session, identity: str) -> EmailState:
    record = get_email_record(session, identity)
    return record.state if record is not None else EmailState.UNSET


def set_email(
    session: Session,
    channels: DeliveryChannels,
    identity: str,
    address: str,
    *,
    now: datetime | None = None,
) -> EmailRecord:
    """Store ``address`` as pending with a fresh code and send the verification email.

    Any previously issued code stops working immediately.
    """

    record = EmailRecord(
        address=ensure_valid_email(address),
        verification_code=str(uuid.uuid4()),
        verification_sent_at=now or now_utc(),
        verified_at=None,
    )
    EmailRepository(session).save(identity, record)

    if channels.mailer is None:
        logger.info("Email delivery disabled; verification email not sent for %s", identity)
        return record

    message = render_verification_email(
        url=_verification_url(
            channels.app_base_url, identity, record.verification_code or ""
        )
    )
    try:
        channels.mailer.send(record.address, message)
    except DownstreamDispatchError:
        logger.exception("Error sending verification email to %s for %s", record.address, identity)
    return record


def verify_email(
    session: Session,
    identity: str,
    code: str,
    *,
    now: datetime | None = None,
) -> EmailRecord:
    """Consume ``code`` and mark the address verified."""

    repository = EmailRepository(session)
    stored = repository.get(identity)
    if stored is None:
        raise NotFoundError()

    record = stored.to_record()
    if record.verification_code is None or record.verification_code != code:
        raise InvalidCodeError()

    current = now or now_utc()
    if record.is_expired(current):
        raise ExpiredError()

    verified = record.mark_verified(current)
    repository.save(identity, verified)
    return verified


def clear_email(session: Session, identity: str) -> None:
    EmailRepository(session).delete(identity)


def get_verified_email(session: Session, identity: str) -> str | None:
    """Return the address only when it has been verified."""

    try:
        record = get_email_record(session, identity)
    except InvalidMetadataError:
        logger.warning("Ignoring corrupt email metadata for %s", identity)
        return None
    if record is None or record.state is not EmailState.VERIFIED:
        return None
    return record.address


def resend_verification(
    session: Session,
    channels: DeliveryChannels,
    identity: str,
    *,
    now: datetime | None = None,
) -> EmailRecord | None:
    """Re-issue a code when the address is still pending; otherwise do nothing."""

    record = get_email_record(session, identity)
    if record is None or record.state is not EmailState.PENDING:
        return None
    return set_email(session, channels, identity, record.address, now=now)


__all__ = [
    "clear_email",
    "get_email_record",
    "get_email_state",
    "get_verified_email",
    "render_verification_email",
    "resend_verification",
    "set_email",
    "verify_email",
]
