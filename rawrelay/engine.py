"""Revalidating cache in front of the origin."""

import asyncio
import time
from collections.abc import Callable
from logging import getLogger
from typing import Optional

from rawrelay.backends import BaseEntryBackend
from rawrelay.directives import CacheControl
from rawrelay.exceptions import FetchError
from rawrelay.exceptions import OriginRejectedError
from rawrelay.origin import OriginClient
from rawrelay.origin import bust_url
from rawrelay.types import CacheEntry
from rawrelay.types import OriginResponse
from rawrelay.types import Provenance
from rawrelay.types import ResolveResult

DEFAULT_TTL = 60.0

logger = getLogger(__name__)


class ResourceCache:
    """Serves origin resources from a TTL cache with ETag revalidation.

    ``resolve`` picks one of three paths:

    1. fresh entry and no forced refresh: return it without any I/O (HIT);
    2. expired entry with a validator: conditional request, a 304 only moves
       the expiry forward (HIT_REVALIDATED);
    3. otherwise, or when the origin sent new content: plain request and full
       replacement of the entry (MISS). Forced refreshes always land here with
       a cache-busting query parameter on the request URL only.

    Network work for one identifier is serialized by a per-identifier lock,
    so concurrent misses for the same URL produce a single origin request.
    Nothing is written to the store unless the origin interaction succeeded.
    """

    def __init__(
        self,
        origin: OriginClient,
        backend: BaseEntryBackend,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl < 0:
            raise ValueError("ttl must not be negative")
        self.origin = origin
        self.backend = backend
        self.ttl = ttl
        self.clock = clock
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, identifier: str) -> asyncio.Lock:
        lock = self._locks.get(identifier)
        if lock is None:
            lock = self._locks[identifier] = asyncio.Lock()
        return lock

    async def peek(self, identifier: str) -> Optional[CacheEntry]:
        """Return the stored entry for ``identifier`` without touching the origin."""
        return await self.backend.get(identifier)

    async def resolve(self, identifier: str, force_fresh: bool = False) -> ResolveResult:
        """Return the content for ``identifier``.

        Raises:
            FetchError: If the origin had to be contacted and failed
        """
        if not identifier:
            raise ValueError("identifier must be a non-empty URL")

        if not force_fresh:
            entry = await self.backend.get(identifier)
            if entry is not None and entry.is_fresh(self.clock()):
                logger.debug("Cache hit for %s", identifier)
                return _result(entry, Provenance.HIT)

        async with self._lock_for(identifier):
            try:
                return await self._refresh(identifier, force_fresh)
            except FetchError as e:
                logger.warning("Fetching %s failed: %s", identifier, e)
                raise

    async def _refresh(self, identifier: str, force_fresh: bool) -> ResolveResult:
        now = self.clock()
        entry = await self.backend.get(identifier)

        if not force_fresh and entry is not None:
            # Another call may have refreshed it while we waited for the lock
            if entry.is_fresh(now):
                logger.debug("Cache hit for %s after waiting", identifier)
                return _result(entry, Provenance.HIT)

            if entry.validator is not None:
                response = await self.origin.fetch(
                    identifier,
                    headers={
                        "If-None-Match": entry.validator,
                        "Cache-Control": str(CacheControl.revalidate()),
                    },
                )
                if response.not_modified:
                    touched = await self.backend.touch(identifier, now + self.ttl)
                    logger.debug("Revalidated %s", identifier)
                    return _result(touched or entry, Provenance.HIT_REVALIDATED)
                return await self._store(identifier, response, now)

        url = bust_url(identifier, now) if force_fresh else identifier
        response = await self.origin.fetch(url)
        if response.not_modified:
            raise OriginRejectedError(
                url, response.status_code, "Origin returned 304 to an unconditional request"
            )
        return await self._store(identifier, response, now)

    async def _store(
        self, identifier: str, response: OriginResponse, now: float
    ) -> ResolveResult:
        entry = CacheEntry(
            identifier=identifier,
            content=response.content,
            content_type=response.content_type,
            validator=response.etag,
            expires_at=now + self.ttl,
        )
        await self.backend.set(identifier, entry)
        logger.debug("Cache miss for %s, stored %d bytes", identifier, len(entry.content))
        return _result(entry, Provenance.MISS)


def _result(entry: CacheEntry, provenance: Provenance) -> ResolveResult:
    return ResolveResult(
        content=entry.content,
        content_type=entry.content_type,
        provenance=provenance,
    )
