"""Repository implementations for infrastructure layer."""

from .email_repository import EmailRepository, StoredEmail
from .feed_repository import FeedRepository
from .nonce_repository import NonceRepository
from .push_subscription_repository import PushSubscriptionRepository
from .type_config_repository import TypeConfigRepository

__all__ = [
    "EmailRepository",
    "StoredEmail",
    "FeedRepository",
    "NonceRepository",
    "PushSubscriptionRepository",
    "TypeConfigRepository",
]
