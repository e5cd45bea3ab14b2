"""In-Memory TTL Cache - process-local CacheBackend with expiry and LRU bound.

Invariants:
    - An entry is never returned at or after its expires_at (expired -> evicted -> miss)
    - len(entries) <= max_entries after every set(); the least recently used entry goes first
    - ttl_seconds <= 0 stores nothing
    - Stats counters only grow until clear()

Design Decisions:
    - OrderedDict LRU: get() moves the key to the end, eviction pops from the front
    - Injectable monotonic clock: wall-clock jumps cannot resurrect entries, and tests
      advance time without sleeping
    - No locks: all access happens on one event loop, and neither method awaits
      between reading and writing the dict
"""

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass
class CacheStats:
    entries: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class MemoryCache:
    """Bounded key-value cache with per-entry TTL."""

    def __init__(
        self,
        max_entries: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._stats = CacheStats()

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            self._stats.misses += 1
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            self._stats.expirations += 1
            self._stats.misses += 1
            return None
        self._entries.move_to_end(key)
        self._stats.hits += 1
        return entry.value

    async def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        if ttl_seconds <= 0:
            self._entries.pop(key, None)
            return
        self._entries[key] = CacheEntry(value, self._clock() + ttl_seconds)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            self._stats.evictions += 1
            logger.debug("Cache entry evicted", extra={"cache_key": evicted})

    async def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    async def clear(self) -> None:
        self._entries.clear()
        self._stats = CacheStats()

    def stats(self) -> CacheStats:
        return CacheStats(
            entries=len(self._entries),
            hits=self._stats.hits,
            misses=self._stats.misses,
            evictions=self._stats.evictions,
            expirations=self._stats.expirations,
        )
