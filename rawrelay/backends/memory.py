import asyncio
import dataclasses
from typing import Optional

from rawrelay.types import CacheEntry

from .base import BaseEntryBackend


class MemoryBackend(BaseEntryBackend):
    """In-memory entry store.

    Entries are immutable, so every update swaps a whole entry under the lock.
    """

    def __init__(self) -> None:
        self.cache: dict[str, CacheEntry] = {}
        self.lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[CacheEntry]:
        async with self.lock:
            return self.cache.get(key)

    async def set(self, key: str, entry: CacheEntry) -> None:
        async with self.lock:
            self.cache[key] = entry

    async def touch(self, key: str, expires_at: float) -> Optional[CacheEntry]:
        async with self.lock:
            cached_entry = self.cache.get(key)
            if cached_entry is None:
                return None
            updated = dataclasses.replace(cached_entry, expires_at=expires_at)
            self.cache[key] = updated
            return updated

    async def delete(self, key: str) -> None:
        async with self.lock:
            self.cache.pop(key, None)

    async def clear(self) -> None:
        async with self.lock:
            self.cache.clear()

    async def get_all_keys(self) -> list[str]:
        async with self.lock:
            return list(self.cache.keys())

    async def get_cache_data(self) -> dict[str, CacheEntry]:
        async with self.lock:
            return dict(self.cache)
