"""
In-memory configuration store for tests and local development.

Deterministic, no external dependencies, lost on restart.
"""

from typing import Dict, Optional

from store.base import ConfigStore


class InMemoryConfigStore(ConfigStore):
    """Dict-backed store. One instance per process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.storage: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.storage.get(key)

    async def put(self, key: str, value: str) -> None:
        self.storage[key] = value

    def __len__(self) -> int:
        return len(self.storage)
