# shopdash/storage/query_cache.py

"""In-memory read cache with per-key single-flight and prefix invalidation."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from shopdash.config.settings import Settings

logger = logging.getLogger("shopdash.cache")

CacheKey = tuple[str, ...]


@dataclass
class CacheEntry:
    """A cached read result for a single key."""

    key: CacheKey
    value: Any
    timestamp: float


class _Flight:
    """A loader call that other readers of the same key can wait on."""

    def __init__(self) -> None:
        self.done = threading.Event()
        self.value: Any = None
        self.error: BaseException | None = None


class QueryCache:
    """Read-through cache for remote API reads.

    Keys are tuples such as ``("products",)`` or ``("product", "p1")``.
    Writes never merge into cached data: after a successful mutation the
    caller invalidates the affected keys and the next read refetches.

    Concurrent :meth:`fetch` calls for one key share a single loader call.
    A loader that finishes after its key was invalidated does not store
    its result, so an invalidation always wins over an older read.
    """

    def __init__(self, ttl: float | None = None) -> None:
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._flights: dict[CacheKey, _Flight] = {}
        # Invalidation counters, tracked only for keys with a load in flight
        self._generations: dict[CacheKey, int] = {}
        self._lock = threading.Lock()
        self._ttl: float = (
            Settings.QUERY_CACHE_TTL if ttl is None else ttl
        )

    def get(self, key: CacheKey) -> Any | None:
        """Return the cached value for *key*, or ``None`` on miss."""
        with self._lock:
            self._evict_expired(time.time())
            entry = self._entries.get(key)
            return entry.value if entry else None

    def set(self, key: CacheKey, value: Any) -> None:
        """Store *value* under *key*."""
        with self._lock:
            self._entries[key] = CacheEntry(
                key=key, value=value, timestamp=time.time(),
            )
        logger.debug("Cached %s", key)

    def fetch(self, key: CacheKey, loader: Callable[[], Any]) -> Any:
        """Return the cached value for *key*, loading it on a miss.

        Only one ``loader`` runs per key at a time; other callers block
        until it finishes and receive the same value or exception.
        """
        with self._lock:
            self._evict_expired(time.time())
            entry = self._entries.get(key)
            if entry is not None:
                logger.debug("Cache hit for %s", key)
                return entry.value
            flight = self._flights.get(key)
            leader = flight is None
            if flight is None:
                flight = _Flight()
                self._flights[key] = flight
            generation = self._generations.get(key, 0)

        if not leader:
            logger.debug("Joining in-flight load for %s", key)
            flight.done.wait()
            if flight.error is not None:
                raise flight.error
            return flight.value

        try:
            value = loader()
        except BaseException as exc:
            flight.error = exc
            raise
        else:
            flight.value = value
            with self._lock:
                if self._generations.get(key, 0) == generation:
                    self._entries[key] = CacheEntry(
                        key=key, value=value, timestamp=time.time(),
                    )
                else:
                    logger.debug(
                        "Discarding stale load for %s (invalidated "
                        "while in flight)",
                        key,
                    )
            return value
        finally:
            with self._lock:
                if self._flights.get(key) is flight:
                    del self._flights[key]
                    self._generations.pop(key, None)
            flight.done.set()

    def invalidate(self, prefix: CacheKey) -> int:
        """Drop every entry whose key starts with *prefix*.

        Returns the number of entries that were removed.
        """
        with self._lock:
            matched = [
                k for k in self._entries if k[: len(prefix)] == prefix
            ]
            for k in matched:
                del self._entries[k]
            for k in self._flights:
                if k[: len(prefix)] == prefix:
                    self._generations[k] = (
                        self._generations.get(k, 0) + 1
                    )
        logger.info(
            "Invalidated %d cache entries for %s", len(matched), prefix
        )
        return len(matched)

    def clear(self) -> int:
        """Purge all cached entries.

        Returns the number of entries that were removed.
        """
        with self._lock:
            count = len(self._entries)
            for k in self._flights:
                self._generations[k] = self._generations.get(k, 0) + 1
            self._entries.clear()
        logger.info("Cache manually purged (%d entries removed)", count)
        return count

    def _evict_expired(self, now: float) -> None:
        """Remove entries older than the TTL threshold.

        Caller must hold the lock.
        """
        expired = [
            k
            for k, e in self._entries.items()
            if now - e.timestamp >= self._ttl
        ]
        for k in expired:
            del self._entries[k]
        if expired:
            logger.debug("Evicted %d expired cache entries", len(expired))
