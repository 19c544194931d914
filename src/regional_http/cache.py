"""
cache.py — In-memory TTL cache with in-flight call deduplication.

Entries expire lazily: an expired entry is dropped the next time its key is
read. Concurrent misses for one key share a single producer call; its result
(or exception) is delivered to every waiter and exceptions are never cached.

Usage:
    cache: TTLCache[DomainConfig] = TTLCache(ttl=3600)
    config = await cache.get("orders", lambda: fetcher.get_domain_config("orders"))
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

from regional_http.utils.logging import get_logger

log = get_logger(__name__)

V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class _CacheEntry(Generic[V]):
    value: V
    expires_at: float


class TTLCache(Generic[V]):
    """Async key/value cache with a fixed time-to-live.

    All bookkeeping happens between awaits, so a single event loop needs no
    lock. Share an instance across threads only behind external locking.
    """

    def __init__(
        self,
        ttl: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            ttl:   Seconds an entry stays valid after it was stored.
            clock: Monotonic time source; injectable for tests.
        """
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self._ttl = float(ttl)
        self._clock = clock
        self._entries: dict[Hashable, _CacheEntry[V]] = {}
        self._in_flight: dict[Hashable, asyncio.Task[V]] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    async def get(self, key: Hashable, producer: Callable[[], Awaitable[V]]) -> V:
        """Return the live value for *key*, producing it at most once.

        Raises whatever *producer* raised; the failure is not cached.
        """
        entry = self._entries.get(key)
        if entry is not None:
            if self._clock() < entry.expires_at:
                log.debug("cache_hit", key=key)
                return entry.value
            del self._entries[key]
            log.debug("cache_expired", key=key)

        task = self._in_flight.get(key)
        if task is None:
            log.debug("cache_miss", key=key)
            task = asyncio.ensure_future(self._produce(key, producer))
            self._in_flight[key] = task
        else:
            log.debug("cache_wait", key=key)

        # A cancelled waiter must not cancel the producer other callers share
        return await asyncio.shield(task)

    async def _produce(self, key: Hashable, producer: Callable[[], Awaitable[V]]) -> V:
        try:
            value = await producer()
        except Exception as exc:
            log.warning("cache_producer_failed", key=key, error=str(exc))
            raise
        else:
            self._entries[key] = _CacheEntry(value=value, expires_at=self._clock() + self._ttl)
            log.debug("cache_store", key=key, ttl=self._ttl)
            return value
        finally:
            self._in_flight.pop(key, None)

    def invalidate(self, key: Hashable) -> None:
        """Drop the stored entry for *key*; an in-flight producer is left alone."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._clock() < entry.expires_at

    def __len__(self) -> int:
        """Number of live entries; expired ones not yet dropped are not counted."""
        now = self._clock()
        return sum(1 for entry in self._entries.values() if now < entry.expires_at)
