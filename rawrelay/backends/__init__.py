"""Entry store implementations for rawrelay."""

from .base import BaseEntryBackend
from .memory import MemoryBackend

__all__ = [
    "BaseEntryBackend",
    "MemoryBackend",
]
