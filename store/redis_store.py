"""
Redis-backed configuration store.

Used when the relay runs on more than one node: every worker reads the same
records. Keys are the phone-number ids, optionally namespaced by a prefix.
"""

import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from store.base import ConfigStore, StoreUnavailableError

logger = logging.getLogger(__name__)


class RedisConfigStore(ConfigStore):
    """Plain GET/SET over redis.asyncio."""

    def __init__(self, client: Redis, key_prefix: str = ""):
        self.client = client
        self.key_prefix = key_prefix

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "", max_connections: int = 64) -> "RedisConfigStore":
        client = Redis.from_url(url, decode_responses=True, max_connections=max_connections)
        return cls(client, key_prefix=key_prefix)

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self.client.get(self._key(key))
        except RedisError as e:
            logger.error(f"Redis error during get: key={key}, {e}")
            raise StoreUnavailableError(f"Config store unavailable: {e}") from e
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def put(self, key: str, value: str) -> None:
        try:
            await self.client.set(self._key(key), value)
        except RedisError as e:
            logger.error(f"Redis error during put: key={key}, {e}")
            raise StoreUnavailableError(f"Config store unavailable: {e}") from e
        logger.info(f"Config stored: key={key}")

    async def close(self) -> None:
        await self.client.aclose()
