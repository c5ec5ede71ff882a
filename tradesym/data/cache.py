"""
Parse Cache

Bounded, thread-safe memo of successful options parses, keyed by the
normalized (trimmed, upper-cased) ticker. Backed by cachetools.LRUCache
so a long-running import service that sees new weekly expiries does not
grow without limit.

Values are frozen dataclasses, so they are handed out without copying.
Concurrent writers may parse the same key twice; parsing is idempotent
so the last write wins harmlessly.
"""

import logging
import threading
from typing import Dict, Generic, Hashable, Optional, TypeVar

from cachetools import LRUCache

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 4096

V = TypeVar("V")


class ParseCache(Generic[V]):
    """LRU cache with hit/miss accounting."""

    def __init__(self, maxsize: int = DEFAULT_MAX_SIZE):
        self.maxsize = maxsize
        self._cache: LRUCache = LRUCache(maxsize=maxsize)
        self._stats = {"hits": 0, "misses": 0}
        self._lock = threading.RLock()

    @staticmethod
    def normalize_key(symbol: str) -> str:
        return symbol.strip().upper()

    def get(self, key: Hashable) -> Optional[V]:
        """Return cached value or None."""
        with self._lock:
            value = self._cache.get(key)
            if value is not None:
                self._stats["hits"] += 1
                return value
            self._stats["misses"] += 1
            return None

    def set(self, key: Hashable, value: V) -> None:
        """Store a value, evicting the least recently used entry when full."""
        with self._lock:
            self._cache[key] = value

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
            self._stats = {"hits": 0, "misses": 0}
        logger.debug("Parse cache cleared")

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_stats(self) -> Dict:
        """Cache statistics."""
        with self._lock:
            total = self._stats["hits"] + self._stats["misses"]
            return {
                "size": len(self._cache),
                "maxsize": self.maxsize,
                "hits": self._stats["hits"],
                "misses": self._stats["misses"],
                "hit_rate": round(self._stats["hits"] / total, 4) if total else 0.0,
            }
