"""Key/value storage for the serialized cart record.

Plays the role browser local storage plays for a client-side cart: string
keys, string values, whole-record replacement on every write.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Protocol

import redis

from storefront.core.constants import CART_EXPIRY_SECONDS

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Process-local storage, used in tests and when Redis is not configured.

    Entries not read or written for ``ttl`` seconds are dropped, like the
    Redis keys they stand in for.
    """

    def __init__(self, ttl: int = CART_EXPIRY_SECONDS) -> None:
        self._ttl = ttl
        self._data: dict[str, str] = {}
        self._last_access: dict[str, float] = {}

    def _cleanup_expired(self) -> None:
        now = time.time()
        expired = [
            key
            for key, last_access in self._last_access.items()
            if now - last_access > self._ttl
        ]
        for key in expired:
            self._data.pop(key, None)
            self._last_access.pop(key, None)

    def _touch(self, key: str) -> None:
        self._last_access[key] = time.time()

    def get_item(self, key: str) -> str | None:
        self._cleanup_expired()
        value = self._data.get(key)
        if value is not None:
            self._touch(key)
        return value

    def set_item(self, key: str, value: str) -> None:
        self._cleanup_expired()
        self._data[key] = value
        self._touch(key)

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)
        self._last_access.pop(key, None)

    def __len__(self) -> int:
        self._cleanup_expired()
        return len(self._data)


class RedisStorage:
    """Storage persisted in Redis with a TTL refreshed on every write.

    Falls back to an in-memory store when Redis is unreachable, the same way
    a browser keeps working with a cart that only lives for the session.
    """

    def __init__(self, redis_url: str | None = None, ttl: int = CART_EXPIRY_SECONDS):
        self._redis_url = redis_url or os.getenv("REDIS_URL")
        self._ttl = ttl
        self._memory = MemoryStorage(ttl)
        self._client = self._init_client()

    @property
    def connected(self) -> bool:
        return self._client is not None

    def _init_client(self):
        if not self._redis_url:
            logger.warning("REDIS_URL is not set; cart uses in-memory fallback")
            return None

        try:
            client = redis.from_url(
                self._redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            client.ping()
            logger.info("Redis cart storage enabled")
            return client
        except redis.RedisError as exc:
            logger.warning("Redis cart init failed, fallback to in-memory: %s", exc)
            return None

    def _switch_to_memory_fallback(self, reason: Exception | str) -> None:
        logger.warning("Redis cart fallback to memory mode: %s", reason)
        self._client = None

    def get_item(self, key: str) -> str | None:
        if not self._client:
            return self._memory.get_item(key)
        try:
            return self._client.get(key)
        except redis.RedisError as exc:
            self._switch_to_memory_fallback(exc)
            return self._memory.get_item(key)

    def set_item(self, key: str, value: str) -> None:
        if self._client:
            try:
                self._client.setex(key, self._ttl, value)
                return
            except redis.RedisError as exc:
                self._switch_to_memory_fallback(exc)
        self._memory.set_item(key, value)

    def remove_item(self, key: str) -> None:
        if self._client:
            try:
                self._client.delete(key)
                return
            except redis.RedisError as exc:
                self._switch_to_memory_fallback(exc)
        self._memory.remove_item(key)


class NamespacedStorage:
    """View over a shared backend that prefixes every key with a client id."""

    def __init__(self, backend: KeyValueStorage, namespace: str):
        self._backend = backend
        self._namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get_item(self, key: str) -> str | None:
        return self._backend.get_item(self._key(key))

    def set_item(self, key: str, value: str) -> None:
        self._backend.set_item(self._key(key), value)

    def remove_item(self, key: str) -> None:
        self._backend.remove_item(self._key(key))


def create_storage(redis_url: str | None = None) -> KeyValueStorage:
    """Redis when a URL is configured, otherwise process memory."""
    if redis_url:
        return RedisStorage(redis_url)
    return MemoryStorage()
