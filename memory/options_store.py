"""
Process-wide option storage.

Holds persistent site configuration such as the selected Search Console
property. Options never expire.
"""

import json
import logging
from typing import Any, Optional

import redis

from config import StorageConfig

logger = logging.getLogger(__name__)


class InMemoryOptionsStore:
    """Options held in a plain dict for the lifetime of the process."""

    def __init__(self, initial: Optional[dict[str, Any]] = None) -> None:
        self._options: dict[str, Any] = dict(initial or {})

    def get(self, name: str, default: Any = None) -> Any:
        return self._options.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._options[name] = value


class RedisOptionsStore:
    """
    Options stored as JSON fields of a single Redis hash.

    Read failures fall back to the default; write failures propagate,
    since a lost option write leaves the site misconfigured.
    """

    HASH_KEY = "sitekit:options"

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisOptionsStore":
        return cls(redis.Redis.from_url(url, encoding="utf-8", decode_responses=True))

    def get(self, name: str, default: Any = None) -> Any:
        try:
            data = self._client.hget(self.HASH_KEY, name)
        except redis.RedisError as e:
            logger.error(f"Failed to read option '{name}': {e}")
            return default
        if data is None:
            return default
        return json.loads(data)

    def set(self, name: str, value: Any) -> None:
        self._client.hset(self.HASH_KEY, name, json.dumps(value))
        logger.debug(f"Option '{name}' saved")


def create_options_store(storage: StorageConfig):
    """Build the options store for the configured backend."""
    if storage.backend == "redis":
        logger.info("Using Redis options store")
        return RedisOptionsStore.from_url(storage.url)
    return InMemoryOptionsStore()
