"""Transactional email delivery via SendGrid."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from inbox.config import Settings
from inbox.domain.errors import DownstreamDispatchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailMessage:
    """A rendered email ready to be sent."""

    subject: str
    html_content: str


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict) or not item.get("message"):
                    continue
                message = str(item["message"])
                help_link = item.get("help")
                messages.append(f"{message} (help: {help_link})" if help_link else message)
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _describe_failure(status_code: Any, body: Any) -> str:
    details = _extract_sendgrid_error_details(body)
    if status_code and details:
        return f"SendGrid API request failed with status {status_code}: {details}"
    if status_code:
        return f"SendGrid API request failed with status {status_code}"
    if details:
        return f"SendGrid API request failed: {details}"
    return "SendGrid API request failed"


class SendGridMailer:
    """Send rendered emails through one SendGrid client created at startup."""

    def __init__(
        self,
        api_key: str,
        sender: str,
        *,
        timeout: float | None = None,
        client: SendGridAPIClient | None = None,
    ) -> None:
        self.sender = sender
        self._client = client or SendGridAPIClient(api_key)
        if timeout is not None and hasattr(self._client, "client"):
            self._client.client.timeout = timeout

    def send(self, recipient: str, message: EmailMessage) -> None:
        """Deliver ``message`` to ``recipient``.

        Raises :class:`DownstreamDispatchError` when SendGrid rejects the
        request or cannot be reached.
        """

        mail = Mail(
            from_email=self.sender,
            to_emails=recipient,
            subject=message.subject,
            html_content=message.html_content,
        )

        try:
            response = self._client.send(mail)
        except Exception as exc:  # SendGrid raises HTTPError subclasses and URLError
            description = _describe_failure(
                getattr(exc, "status_code", None), getattr(exc, "body", None)
            )
            logger.error(description)
            raise DownstreamDispatchError(description) from exc

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            description = _describe_failure(status_code, getattr(response, "body", None))
            logger.error(description)
            raise DownstreamDispatchError(description)


def build_mailer(settings: Settings) -> SendGridMailer | None:
    """Return the process-wide mailer, or ``None`` when email is not configured."""

    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; email delivery disabled")
        return None
    return SendGridMailer(
        settings.sendgrid_api_key,
        settings.sendgrid_sender,
        timeout=settings.outbound_timeout_seconds,
    )


__all__ = ["EmailMessage", "SendGridMailer", "build_mailer"]
