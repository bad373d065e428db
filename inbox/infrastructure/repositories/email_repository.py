"""Persistence helpers for the email address of an identity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from inbox.domain.entities import EmailRecord
from inbox.infrastructure.keys import email_key
from inbox.infrastructure.kv_store import KeyValueStore


@dataclass(frozen=True)
class StoredEmail:
    """Raw stored address and metadata, before structural validation."""

    address: str
    metadata: Any

    def to_record(self) -> EmailRecord:
        return EmailRecord.from_metadata(self.address, self.metadata)


class EmailRepository:
    def __init__(self, session: Session) -> None:
        self.store = KeyValueStore(session)

    def get(self, identity: str) -> StoredEmail | None:
        stored = self.store.get_with_metadata(email_key(identity))
        if not stored.value:
            return None
        return StoredEmail(address=stored.value, metadata=stored.metadata)

    def save(self, identity: str, record: EmailRecord) -> None:
        self.store.put(
            email_key(identity), record.address, metadata=record.to_metadata()
        )

    def delete(self, identity: str) -> None:
        self.store.delete(email_key(identity))


__all__ = ["EmailRepository", "StoredEmail"]
