"""Persistence helpers for feed items."""

from __future__ import annotations

import json
import uuid
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from inbox.domain.entities import FeedItem
from inbox.infrastructure.keys import item_key, strip_key_prefix
from inbox.infrastructure.kv_store import KeyValueStore
from inbox.utils import isoformat_utc, now_utc


class FeedRepository:
    """Append-only, identity-scoped event log."""

    def __init__(self, session: Session) -> None:
        self.store = KeyValueStore(session)

    def append(
        self,
        identity: str,
        item_type: str,
        data: Any,
        *,
        timestamp: datetime | None = None,
        chain_id: str | None = None,
    ) -> FeedItem:
        item_id = f"{item_type}/{uuid.uuid4()}"
        stamped = isoformat_utc(timestamp or now_utc())
        self.store.put(
            item_key(identity, item_id),
            json.dumps(data),
            metadata={"timestamp": stamped, "chainId": chain_id},
        )
        return FeedItem(id=item_id, data=data, timestamp=stamped, chain_id=chain_id)

    def list_for_identity(
        self,
        identity: str,
        *,
        item_type: str | None = None,
        chain_id: str | None = None,
    ) -> Sequence[FeedItem]:
        prefix = item_key(identity, f"{item_type}/" if item_type else "")
        ids = [strip_key_prefix(key) for key in self.store.iter_keys(prefix)]
        items = [self._load(identity, item_id) for item_id in ids]
        loaded = [item for item in items if item is not None]
        if chain_id:
            return [item for item in loaded if item.chain_id == chain_id]
        return loaded

    def delete(self, identity: str, ids: Iterable[str]) -> None:
        for item_id in set(ids):
            self.store.delete(item_key(identity, item_id))

    def _load(self, identity: str, item_id: str) -> FeedItem | None:
        stored = self.store.get_with_metadata(item_key(identity, item_id))
        # Deleted between the scan and the read.
        if stored.value is None:
            return None
        metadata = stored.metadata if isinstance(stored.metadata, dict) else {}
        timestamp = metadata.get("timestamp")
        chain_id = metadata.get("chainId")
        try:
            data = json.loads(stored.value) if stored.value else None
        except json.JSONDecodeError:
            data = None
        return FeedItem(
            id=item_id,
            data=data,
            timestamp=timestamp if isinstance(timestamp, str) else None,
            chain_id=chain_id if isinstance(chain_id, str) else None,
        )


__all__ = ["FeedRepository"]
