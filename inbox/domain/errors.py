"""Error taxonomy shared by the use cases and the HTTP layer."""

from __future__ import annotations


class InboxError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500
    default_message = "Internal server error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthError(InboxError):
    """Bad shared secret, bad signature or rejected nonce."""

    status_code = 401
    default_message = "Unauthorized."


class ReplayOrStaleNonceError(AuthError):
    """The declared nonce is not the next expected value for the identity."""

    default_message = "Invalid nonce."

    def __init__(self, expected: int, received: object) -> None:
        self.expected = expected
        self.received = received
        super().__init__(f"Invalid nonce. Expected: {expected}")


class ValidationError(InboxError):
    """Malformed body, missing required fields or unparseable identity."""

    status_code = 400
    default_message = "Invalid request body"


class EmailVerificationError(InboxError):
    """Base class for the user-facing failures of the verification flow."""

    status_code = 400


class NotFoundError(EmailVerificationError):
    default_message = "Email not found. Try again in a few minutes or contact us."


class InvalidCodeError(EmailVerificationError):
    default_message = "Invalid verification code."


class ExpiredError(EmailVerificationError):
    default_message = "Verification code expired."


class InternalError(InboxError):
    """Unexpected state, such as corrupt stored metadata."""


class InvalidMetadataError(InternalError):
    default_message = "Invalid email metadata. Try again in a few minutes or contact us."


class DownstreamDispatchError(InboxError):
    """An email, push or realtime send failed. Logged, never surfaced."""

    default_message = "Downstream dispatch failed."


class SubscriptionGoneError(DownstreamDispatchError):
    """The push service reports the subscription no longer exists."""

    default_message = "Push subscription expired."


__all__ = [
    "InboxError",
    "AuthError",
    "ReplayOrStaleNonceError",
    "ValidationError",
    "EmailVerificationError",
    "NotFoundError",
    "InvalidCodeError",
    "ExpiredError",
    "InternalError",
    "InvalidMetadataError",
    "DownstreamDispatchError",
    "SubscriptionGoneError",
]
