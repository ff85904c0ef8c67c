from abc import ABC
from abc import abstractmethod
from typing import Optional

from rawrelay.types import CacheEntry


class BaseEntryBackend(ABC):
    """Base class for all entry stores."""

    @abstractmethod
    async def get(self, key: str) -> Optional[CacheEntry]:
        """Retrieve an entry, expired or not."""

    @abstractmethod
    async def set(self, key: str, entry: CacheEntry) -> None:
        """Store an entry, replacing any previous one."""

    @abstractmethod
    async def touch(self, key: str, expires_at: float) -> Optional[CacheEntry]:
        """Move an entry's expiry, leaving everything else as it was."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove an entry."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove all entries."""

    @abstractmethod
    async def get_all_keys(self) -> list[str]:
        """List the keys of all stored entries."""

    @abstractmethod
    async def get_cache_data(self) -> dict[str, CacheEntry]:
        """Snapshot of all stored entries."""
