"""Key layout of the key/value store.

Every key starts with an entity tag and the owning identity so per-identity
listings are prefix scans.
"""


def item_key(identity: str, item_id: str) -> str:
    """Key that stores a feed item; ``item_id`` is ``{type}/{suffix}``."""

    return f"ITEM:{identity}:{item_id}"


def email_key(identity: str) -> str:
    """Key that stores an identity's email address."""

    return f"EMAIL:{identity}"


def type_config_key(identity: str, item_type: str) -> str:
    """Key that stores the channel mask of one type."""

    return f"TYPE:{identity}:{item_type}"


def push_key(identity: str, subscription_key: str) -> str:
    """Key that stores one push subscription."""

    return f"PUSH:{identity}:{subscription_key}"


def nonce_key(identity: str) -> str:
    """Key that stores the next expected mutation nonce."""

    return f"NONCE:{identity}"


def strip_key_prefix(key: str) -> str:
    """Return the part of ``key`` after ``TAG:identity:``."""

    return ":".join(key.split(":")[2:])


__all__ = [
    "item_key",
    "email_key",
    "type_config_key",
    "push_key",
    "nonce_key",
    "strip_key_prefix",
]
