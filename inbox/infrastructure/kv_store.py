"""Ordered, prefix-scannable key/value store on top of SQLAlchemy."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from inbox.infrastructure.models import KVEntryModel

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 1000


@dataclass(frozen=True)
class KVValue:
    value: str | None
    metadata: Any = None


@dataclass(frozen=True)
class KVListResult:
    """One page of a prefix scan.

    ``cursor`` is only set when ``list_complete`` is false and must be passed
    back to fetch the next page.
    """

    keys: list[str] = field(default_factory=list)
    list_complete: bool = True
    cursor: str | None = None


class KeyValueStore:
    """Single-key reads and writes with attached metadata.

    There are no multi-key transactions: every write commits on its own.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, key: str) -> str | None:
        model = self.session.get(KVEntryModel, key)
        return model.value if model is not None else None

    def get_with_metadata(self, key: str) -> KVValue:
        model = self.session.get(KVEntryModel, key)
        if model is None:
            return KVValue(value=None, metadata=None)
        return KVValue(value=model.value, metadata=model.entry_metadata)

    def get_json(self, key: str) -> Any:
        """Return the decoded JSON value of ``key``, or ``None`` if absent or invalid."""

        value = self.get(key)
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Stored value for %s is not valid JSON", key)
            return None

    def put(self, key: str, value: str, *, metadata: Any = None) -> None:
        model = self.session.get(KVEntryModel, key)
        if model is None:
            model = KVEntryModel(key=key)
        model.value = value
        model.entry_metadata = metadata
        self.session.add(model)
        self.session.commit()

    def delete(self, key: str) -> None:
        model = self.session.get(KVEntryModel, key)
        if model is None:
            return
        self.session.delete(model)
        self.session.commit()

    def list(
        self,
        *,
        prefix: str = "",
        cursor: str | None = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> KVListResult:
        """Return up to ``limit`` keys starting with ``prefix`` in key order."""

        if limit <= 0:
            raise ValueError("limit must be positive")

        query = self.session.query(KVEntryModel.key)
        if prefix:
            # LIKE is case-insensitive on some backends; compare the raw prefix.
            query = query.filter(KVEntryModel.key >= prefix).filter(
                func.substr(KVEntryModel.key, 1, len(prefix)) == prefix
            )
        if cursor is not None:
            query = query.filter(KVEntryModel.key > cursor)
        rows = query.order_by(KVEntryModel.key.asc()).limit(limit + 1).all()

        keys = [row[0] for row in rows[:limit]]
        if len(rows) <= limit:
            return KVListResult(keys=keys, list_complete=True, cursor=None)
        return KVListResult(keys=keys, list_complete=False, cursor=keys[-1])

    def iter_keys(self, prefix: str, *, page_size: int = DEFAULT_LIST_LIMIT) -> Iterator[str]:
        """Yield every key under ``prefix``, following cursors until exhaustion."""

        cursor: str | None = None
        while True:
            page = self.list(prefix=prefix, cursor=cursor, limit=page_size)
            yield from page.keys
            if page.list_complete:
                break
            cursor = page.cursor


__all__ = ["KeyValueStore", "KVListResult", "KVValue", "DEFAULT_LIST_LIMIT"]
