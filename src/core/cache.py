"""Process-wide TTL memoization for enrichment lookups."""
from __future__ import annotations

import logging
import re
import threading
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

DEFAULT_TTL_S = 60 * 60
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    key: str
    value: V
    inserted_at: float


def make_cache_key(query: str, max_results: int) -> str:
    """Normalise a search query and result count into a cache key."""

    normalised = _WHITESPACE.sub(" ", query.strip().lower())
    return f"{normalised}-{max_results}"


class ResultCache(Generic[V]):
    """Key/value store whose entries expire ``ttl_s`` seconds after insertion.

    Expiry is lazy: a stale entry is dropped when it is next looked up. The
    lock only guards the map; ``fetch_fn`` runs outside it, so two concurrent
    misses on one key may both fetch and the last write wins.
    """

    def __init__(
        self,
        ttl_s: float = DEFAULT_TTL_S,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_s <= 0:
            raise ValueError("ttl_s must be positive")
        self.ttl_s = ttl_s
        self._clock = clock
        self._entries: Dict[str, CacheEntry[V]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Optional[V]:
        """Return the fresh value for ``key`` or None, evicting it if stale."""

        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if now - entry.inserted_at > self.ttl_s:
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(key=key, value=value, inserted_at=self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    async def get_or_fetch(self, key: str, fetch_fn: Callable[[], Awaitable[V]]) -> V:
        """Return the cached value or fetch, store and return a new one.

        Exceptions from ``fetch_fn`` propagate and nothing is stored.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                if self._clock() - entry.inserted_at <= self.ttl_s:
                    logger.debug("Cache hit for %s", key)
                    return entry.value
                del self._entries[key]

        logger.debug("Cache miss for %s", key)
        value = await fetch_fn()
        self.set(key, value)
        return value
