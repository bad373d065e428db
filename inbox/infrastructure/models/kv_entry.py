"""SQLAlchemy model backing the key/value store."""

from sqlalchemy import JSON, Column, String, Text

from inbox.infrastructure.database import Base


class KVEntryModel(Base):
    """One key with its string value and optional JSON metadata.

    Keys are ordered lexicographically; prefix scans over them back every
    per-identity listing.
    """

    __tablename__ = "kv_entry"

    key = Column(String(512), primary_key=True)
    value = Column(Text, nullable=False)
    entry_metadata = Column("metadata", JSON, nullable=True)


__all__ = ["KVEntryModel"]
