"""
Transient (expiring) key/value storage.

Values are cached with a TTL in seconds and disappear once it elapses.
There is no explicit invalidation: entries only ever expire.
"""

import json
import logging
import time
from typing import Any, Callable, Optional

import redis

from config import StorageConfig

logger = logging.getLogger(__name__)


class InMemoryTransientStore:
    """
    Process-local transient store.

    Used for development/testing or when no Redis backend is configured.
    Data is not persisted and will be lost on restart. The clock is
    injectable so expiry can be driven deterministically.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._store: dict[str, tuple[Any, float]] = {}

    def get(self, key: str) -> Optional[Any]:
        """Get a value by key, or None when missing or expired."""
        if key in self._store:
            value, expiry = self._store[key]
            if expiry > self._clock():
                return value
            del self._store[key]
        return None

    def set(self, key: str, value: Any, ttl: int) -> None:
        """Set a value that expires after `ttl` seconds."""
        self._store[key] = (value, self._clock() + ttl)


class RedisTransientStore:
    """Transient store backed by Redis SETEX with JSON-encoded values."""

    PREFIX = "transient"

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisTransientStore":
        return cls(redis.Redis.from_url(url, encoding="utf-8", decode_responses=True))

    def _make_key(self, key: str) -> str:
        return f"sitekit:{self.PREFIX}:{key}"

    def get(self, key: str) -> Optional[Any]:
        try:
            data = self._client.get(self._make_key(key))
        except redis.RedisError as e:
            logger.error(f"Transient get failed for '{key}': {e}")
            return None
        if data is None:
            return None
        return json.loads(data)

    def set(self, key: str, value: Any, ttl: int) -> None:
        try:
            self._client.setex(self._make_key(key), ttl, json.dumps(value))
        except redis.RedisError as e:
            logger.error(f"Transient set failed for '{key}': {e}")


def create_transient_store(storage: StorageConfig):
    """Build the transient store for the configured backend."""
    if storage.backend == "redis":
        logger.info("Using Redis transient store")
        return RedisTransientStore.from_url(storage.url)
    return InMemoryTransientStore()
