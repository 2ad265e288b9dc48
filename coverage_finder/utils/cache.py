"""
In-memory cache of coverage classifications.

Keyed by the trimmed address and city of a lookup. Entries live as long as
the page session that owns the cache; nothing is written to disk.
"""

from __future__ import annotations

import logging
from typing import Dict, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


def make_address_key(address: str, city: str) -> str:
    """Composite cache key for an address lookup."""
    return f"{address.strip()}|{city.strip()}"


class CoverageCache(Generic[V]):
    """Unbounded dict-backed cache."""

    def __init__(self, name: str = "coverage"):
        self.name = name
        self._entries: Dict[str, V] = {}

    def get(self, key: str) -> Optional[V]:
        """Cached value or None."""
        value = self._entries.get(key)
        if value is not None:
            logger.debug(f"[{self.name}] Cache hit for {key!r}")
        return value

    def set(self, key: str, value: V) -> None:
        self._entries[key] = value
        logger.debug(f"[{self.name}] Cached {key!r}")
