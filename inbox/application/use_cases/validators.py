"""Common validation helpers for inbox use cases."""

from __future__ import annotations

from typing import Any

from inbox.domain.errors import ValidationError

MAX_EMAIL_LENGTH = 254


def ensure_valid_email(email: str) -> str:
    """Return a trimmed email address or raise :class:`ValidationError`."""

    normalized = email.strip()
    if not normalized or len(normalized) > MAX_EMAIL_LENGTH:
        raise ValidationError("Invalid email address.")
    if normalized.count("@") != 1 or any(char.isspace() for char in normalized):
        raise ValidationError("Invalid email address.")

    local_part, domain = normalized.split("@", 1)
    if not local_part or "." not in domain.strip("."):
        raise ValidationError("Invalid email address.")

    return f"{local_part}@{domain.lower()}"


def ensure_item_ids(ids: Any) -> list[str]:
    """Validate a non-empty list of non-empty string ids."""

    if not isinstance(ids, list) or not ids:
        raise ValidationError("Invalid request body")
    if any(not isinstance(item_id, str) or not item_id for item_id in ids):
        raise ValidationError("Invalid request body")
    return ids


def ensure_item_type(item_type: Any) -> str:
    """Reject types that would collide with the item id or key separators."""

    if not isinstance(item_type, str) or not item_type:
        raise ValidationError("Invalid notification type.")
    if "/" in item_type or ":" in item_type:
        raise ValidationError("Invalid notification type.")
    return item_type


def ensure_channel_masks(types: Any) -> dict[str, int]:
    """Validate a ``{type: mask}`` mapping of non-negative integer masks."""

    if not isinstance(types, dict):
        raise ValidationError("Invalid notification settings.")
    masks: dict[str, int] = {}
    for item_type, mask in types.items():
        ensure_item_type(item_type)
        if isinstance(mask, bool) or not isinstance(mask, int) or mask < 0:
            raise ValidationError(f"Invalid notification settings for {item_type}.")
        masks[item_type] = mask
    return masks

