"""SQLAlchemy models used by the infrastructure layer."""

from .kv_entry import KVEntryModel

__all__ = ["KVEntryModel"]
