"""Domain entity representing the email address attached to an identity."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from inbox.domain.errors import InvalidMetadataError
from inbox.utils import from_epoch_ms, to_epoch_ms

VERIFICATION_CODE_TTL = timedelta(days=3)


class EmailState(str, Enum):
    UNSET = "unset"
    PENDING = "pending"
    VERIFIED = "verified"


@dataclass(frozen=True)
class EmailRecord:
    """At most one address per identity, pending or verified.

    A verified record never carries a verification code.
    """

    address: str
    verification_code: str | None
    verification_sent_at: datetime
    verified_at: datetime | None = None

    @property
    def state(self) -> EmailState:
        if self.verified_at is not None:
            return EmailState.VERIFIED
        return EmailState.PENDING

    @property
    def expires_at(self) -> datetime:
        return self.verification_sent_at + VERIFICATION_CODE_TTL

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def mark_verified(self, now: datetime) -> "EmailRecord":
        return EmailRecord(
            address=self.address,
            verification_code=None,
            verification_sent_at=self.verification_sent_at,
            verified_at=now,
        )

    def to_metadata(self) -> dict[str, Any]:
        return {
            "verificationCode": self.verification_code,
            "verificationSentAt": to_epoch_ms(self.verification_sent_at),
            "verifiedAt": to_epoch_ms(self.verified_at)
            if self.verified_at is not None
            else None,
        }

    @classmethod
    def from_metadata(cls, address: str, metadata: Any) -> "EmailRecord":
        """Rebuild a record from stored metadata.

        Raises :class:`InvalidMetadataError` when the metadata is not the shape
        written by :meth:`to_metadata`.
        """

        if not isinstance(metadata, dict):
            raise InvalidMetadataError()
        if not {"verificationCode", "verificationSentAt", "verifiedAt"} <= metadata.keys():
            raise InvalidMetadataError()

        code = metadata["verificationCode"]
        sent_at = metadata["verificationSentAt"]
        verified_at = metadata["verifiedAt"]
        if code is not None and not isinstance(code, str):
            raise InvalidMetadataError()
        if not _is_epoch_ms(sent_at):
            raise InvalidMetadataError()
        if verified_at is not None and not _is_epoch_ms(verified_at):
            raise InvalidMetadataError()
        if verified_at is not None and code is not None:
            raise InvalidMetadataError()

        try:
            sent_at_value = from_epoch_ms(sent_at)
            verified_at_value = (
                from_epoch_ms(verified_at) if verified_at is not None else None
            )
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidMetadataError() from exc

        return cls(
            address=address,
            verification_code=code,
            verification_sent_at=sent_at_value,
            verified_at=verified_at_value,
        )


def _is_epoch_ms(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


__all__ = ["EmailRecord", "EmailState", "VERIFICATION_CODE_TTL"]
