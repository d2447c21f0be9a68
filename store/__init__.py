"""
Configuration store exports.

Key-value backends keyed by WhatsApp phone-number id.
"""

from store.base import ConfigStore, StoreUnavailableError
from store.memory import InMemoryConfigStore
from store.sqlite import SQLiteConfigStore
from store.redis_store import RedisConfigStore

__all__ = [
    "ConfigStore",
    "StoreUnavailableError",
    "InMemoryConfigStore",
    "SQLiteConfigStore",
    "RedisConfigStore",
]
