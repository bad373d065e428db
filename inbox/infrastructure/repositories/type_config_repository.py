"""Persistence helpers for per-type channel masks."""

from __future__ import annotations

from sqlalchemy.orm import Session

from inbox.infrastructure.keys import strip_key_prefix, type_config_key
from inbox.infrastructure.kv_store import KeyValueStore


class TypeConfigRepository:
    def __init__(self, session: Session) -> None:
        self.store = KeyValueStore(session)

    def get(self, identity: str, item_type: str) -> int | None:
        """Return the stored mask, or ``None`` when absent or not a number."""

        value = self.store.get(type_config_key(identity, item_type))
        if not value:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    def set(self, identity: str, item_type: str, mask: int) -> None:
        self.store.put(type_config_key(identity, item_type), str(mask))

    def list_for_identity(self, identity: str) -> dict[str, int | None]:
        prefix = type_config_key(identity, "")
        types = [strip_key_prefix(key) for key in self.store.iter_keys(prefix)]
        return {item_type: self.get(identity, item_type) for item_type in types}


__all__ = ["TypeConfigRepository"]
