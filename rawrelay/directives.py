from enum import Enum
from typing import Optional


class DirectiveType(Enum):
    MAX_AGE = "max-age"
    NO_CACHE = "no-cache"
    NO_STORE = "no-store"
    PUBLIC = "public"
    PRIVATE = "private"
    MUST_REVALIDATE = "must-revalidate"


class CacheControl:
    """Builder for ``Cache-Control`` header values."""

    def __init__(self) -> None:
        self.directives: list[str] = []

    def add(self, directive: DirectiveType, value: Optional[int] = None) -> "CacheControl":
        if value is not None:
            self.directives.append(f"{directive.value}={value}")
        else:
            self.directives.append(directive.value)
        return self

    @classmethod
    def revalidate(cls) -> "CacheControl":
        """Ask intermediaries to revalidate with the origin instead of answering."""
        return cls().add(DirectiveType.NO_CACHE).add(DirectiveType.MAX_AGE, 0)

    @classmethod
    def public(cls, max_age: int) -> "CacheControl":
        """Directives for a relayed resource shared by all clients."""
        return cls().add(DirectiveType.PUBLIC).add(DirectiveType.MAX_AGE, max_age)

    def __str__(self) -> str:
        return ", ".join(self.directives)
