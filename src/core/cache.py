"""In-memory TTL cache with pattern invalidation and a background sweep.

Entries carry their own TTL and insertion time. Reads evict stale
entries lazily; an optional asyncio sweeper bounds growth from keys that
are written and never read again. An optional maxsize adds simple LRU
eviction.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CacheEntry(Generic[T]):
    value: T
    stored_at: float  # clock() at insertion
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.stored_at <= self.ttl


class TTLCache(Generic[T]):
    def __init__(
        self,
        *,
        ttl_seconds: float = 300.0,
        maxsize: Optional[int] = None,
        sweep_interval: float = 30.0,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._ttl = float(ttl_seconds)
        self._maxsize = int(maxsize) if maxsize else None
        self._sweep_interval = float(sweep_interval)
        self._clock = clock or time.monotonic
        self._store: "OrderedDict[str, CacheEntry[T]]" = OrderedDict()
        self._sweeper: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._store)

    @property
    def default_ttl(self) -> float:
        return self._ttl

    def get(self, key: str, default: Any = None) -> Any:
        """Return the fresh value for `key`, or `default` on a miss.

        Pass a sentinel as `default` when `None` is itself a cached value.
        """
        entry = self._store.get(key)
        if entry is None:
            return default

        # Stale entries are never returned; evict on read
        if not entry.is_fresh(self._clock()):
            del self._store[key]
            return default

        self._store.move_to_end(key, last=True)
        return entry.value

    def has(self, key: str) -> bool:
        entry = self._store.get(key)
        if entry is None:
            return False
        if not entry.is_fresh(self._clock()):
            del self._store[key]
            return False
        return True

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> None:
        ttl_value = self._ttl if ttl is None else float(ttl)
        self._store[key] = CacheEntry(value=value, stored_at=self._clock(), ttl=ttl_value)
        self._store.move_to_end(key, last=True)

        if self._maxsize is not None:
            while len(self._store) > self._maxsize:
                self._store.popitem(last=False)

    def clear(self, pattern: Optional[str] = None) -> int:
        """Remove all entries, or only those whose key contains `pattern`."""
        if not pattern:
            removed = len(self._store)
            self._store.clear()
            return removed

        doomed = [k for k in self._store if pattern in k]
        for k in doomed:
            del self._store[k]
        if doomed:
            logger.debug("Invalidated %d cache entries matching %r", len(doomed), pattern)
        return len(doomed)

    def sweep(self) -> int:
        now = self._clock()
        expired = [k for k, e in self._store.items() if not e.is_fresh(now)]
        for k in expired:
            del self._store[k]
        return len(expired)

    def stats(self) -> Dict[str, Any]:
        keys: List[str] = list(self._store.keys())
        return {"size": len(keys), "keys": keys}

    # --- Background sweep ---

    def start_sweeper(self) -> None:
        """Start the periodic sweep on the running event loop (idempotent)."""
        if self._sweeper is not None and not self._sweeper.done():
            return
        if self._sweep_interval <= 0:
            return
        loop = asyncio.get_running_loop()
        self._sweeper = loop.create_task(self._sweep_forever())

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            removed = self.sweep()
            if removed:
                logger.debug("Cache sweep evicted %d expired entries", removed)

    def destroy(self) -> None:
        if self._sweeper is not None:
            self._sweeper.cancel()
            self._sweeper = None
        self._store.clear()
