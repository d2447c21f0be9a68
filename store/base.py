"""
Abstract configuration store interface.

The store is a plain key-value map: phone-number id -> JSON string.
Services depend only on this interface, not on specific backends.
"""

from abc import ABC, abstractmethod
from typing import Optional


class StoreUnavailableError(Exception):
    """Backing store could not be reached or returned garbage."""
    pass


class ConfigStore(ABC):
    """
    Abstract key-value boundary.

    Key properties:
    - get/put are atomic per key, never transactional across keys
    - Values are opaque strings (serialization belongs to the caller)
    - Backend failures raise StoreUnavailableError
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Returns:
            The stored string, or None if the key is absent.
        """
        raise NotImplementedError

    @abstractmethod
    async def put(self, key: str, value: str) -> None:
        """Write (or overwrite) a value."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release backend resources. No-op by default."""
        return None
