"""Type definitions for rawrelay."""

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from enum import Enum

DEFAULT_CONTENT_TYPE = "text/plain; charset=utf-8"


class Provenance(str, Enum):
    """How a resolve call produced its result."""

    HIT = "HIT"
    MISS = "MISS"
    HIT_REVALIDATED = "HIT_REVALIDATED"

    @property
    def header_value(self) -> str:
        """Value rendered in the ``X-Cache`` response header."""
        if self is Provenance.HIT_REVALIDATED:
            return "REVALIDATED"
        return self.value


@dataclass(frozen=True)
class CacheEntry:
    """Cached origin resource.

    Args:
        identifier: Origin URL the entry is keyed by
        content: Body as last retrieved
        content_type: Content type of the same response as ``content``
        validator: Entity tag sent by the origin, if any
        expires_at: Epoch timestamp after which the entry needs revalidation
    """

    identifier: str
    content: bytes
    content_type: str
    validator: str | None
    expires_at: float

    def is_fresh(self, now: float) -> bool:
        return now < self.expires_at


@dataclass(frozen=True)
class ResolveResult:
    """Content handed back to the caller of ``ResourceCache.resolve``."""

    content: bytes
    content_type: str
    provenance: Provenance

    @property
    def from_cache(self) -> bool:
        return self.provenance is not Provenance.MISS


@dataclass(frozen=True)
class OriginResponse:
    """Accepted (2xx or 304) response from the origin."""

    url: str
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    content: bytes = b""

    @property
    def not_modified(self) -> bool:
        return self.status_code == 304

    @property
    def etag(self) -> str | None:
        return self.headers.get("etag") or None

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type") or DEFAULT_CONTENT_TYPE
