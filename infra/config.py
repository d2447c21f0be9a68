"""
Infrastructure configuration system.

Environment-based backend selection with sensible defaults.
Read per call so tests can patch the environment.
"""

import os
from dataclasses import dataclass
from typing import Literal, Optional

from store import ConfigStore, InMemoryConfigStore, RedisConfigStore, SQLiteConfigStore
from transport.whatsapp.forwarder import DEFAULT_USER_AGENT, FlowForwarder


StoreBackendType = Literal["memory", "sqlite", "redis"]


@dataclass
class InfraConfig:
    """Infrastructure configuration from environment."""

    # Shared secret for the subscription handshake and the edit fallback
    webhook_verify_token: str

    # Store
    store_backend: StoreBackendType
    sqlite_db_path: str
    redis_url: str
    redis_key_prefix: str

    # Downstream flow calls
    flow_timeout_seconds: float
    flow_user_agent: str

    @classmethod
    def from_env(cls) -> "InfraConfig":
        """
        Load configuration from environment variables.

        Defaults favor a single local node:
        - Store: sqlite file next to the app
        - Flow timeout: 30s
        """
        return cls(
            webhook_verify_token=os.getenv("WEBHOOK_VERIFY_TOKEN", ""),

            store_backend=os.getenv("STORE_BACKEND", "sqlite").lower(),  # type: ignore
            sqlite_db_path=os.getenv("SQLITE_DB_PATH", "./student_configs.db"),
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            redis_key_prefix=os.getenv("REDIS_KEY_PREFIX", ""),

            flow_timeout_seconds=float(os.getenv("FLOW_TIMEOUT_SECONDS", "30")),
            flow_user_agent=os.getenv("FLOW_USER_AGENT", DEFAULT_USER_AGENT),
        )

    def create_store(self) -> ConfigStore:
        """Create store backend instance based on configuration."""
        if self.store_backend == "redis":
            return RedisConfigStore.from_url(self.redis_url, key_prefix=self.redis_key_prefix)
        elif self.store_backend == "memory":
            return InMemoryConfigStore()
        elif self.store_backend == "sqlite":
            return SQLiteConfigStore(db_path=self.sqlite_db_path)
        else:
            raise ValueError(f"Unknown STORE_BACKEND: {self.store_backend!r}")

    def create_forwarder(self, transport: Optional[object] = None) -> FlowForwarder:
        """Create the flow forwarder."""
        return FlowForwarder(
            timeout=self.flow_timeout_seconds,
            user_agent=self.flow_user_agent,
            transport=transport,
        )


def get_config() -> InfraConfig:
    """Get infrastructure configuration from the current environment."""
    return InfraConfig.from_env()
