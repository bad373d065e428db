"""Persistence helpers for mutation nonces."""

from __future__ import annotations

from sqlalchemy.orm import Session

from inbox.infrastructure.keys import nonce_key
from inbox.infrastructure.kv_store import KeyValueStore


class NonceRepository:
    def __init__(self, session: Session) -> None:
        self.store = KeyValueStore(session)

    def get_expected(self, identity: str) -> int:
        """Return the next nonce the identity must sign; 0 when never used."""

        value = self.store.get(nonce_key(identity))
        if not value:
            return 0
        try:
            return int(value)
        except ValueError:
            return 0

    def set_expected(self, identity: str, nonce: int) -> None:
        self.store.put(nonce_key(identity), str(nonce))


__all__ = ["NonceRepository"]
