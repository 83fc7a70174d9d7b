"""
Memory module initialization.

Provides the persistent options store and the expiring transient store.
"""

from memory.options_store import (
    InMemoryOptionsStore,
    RedisOptionsStore,
    create_options_store,
)
from memory.transient_store import (
    InMemoryTransientStore,
    RedisTransientStore,
    create_transient_store,
)

__all__ = [
    "InMemoryOptionsStore",
    "RedisOptionsStore",
    "create_options_store",
    "InMemoryTransientStore",
    "RedisTransientStore",
    "create_transient_store",
]
