"""Integrations package - storage backends and the payment provider."""

from storefront.integrations.paystack import PaystackClient, PaystackVerifier
from storefront.integrations.storage import (
    KeyValueStorage,
    MemoryStorage,
    NamespacedStorage,
    RedisStorage,
    create_storage,
)

__all__ = [
    "KeyValueStorage",
    "MemoryStorage",
    "NamespacedStorage",
    "PaystackClient",
    "PaystackVerifier",
    "RedisStorage",
    "create_storage",
]
