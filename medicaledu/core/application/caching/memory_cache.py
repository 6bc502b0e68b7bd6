# medicaledu/core/application/caching/memory_cache.py
"""
In-process response cache with prefix-based invalidation.

Every key is registered under its prefix (the part before the last ``_``) so
``remove_by_prefix("GetAllCourses")`` drops every cached page of the course
catalogue at once.
"""

from __future__ import annotations

import asyncio
import threading
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Set, Tuple

import structlog

from medicaledu.core.application.caching.cache_service import CacheEntryOptions, CacheItemPriority

logger = structlog.get_logger()


def extract_prefix(key: str) -> str:
    index = key.rfind("_")
    return key[:index] if index > 0 else key


@dataclass
class _Entry:
    value: Any
    created: float
    last_access: float
    absolute_deadline: Optional[float]
    sliding: Optional[float]
    priority: CacheItemPriority
    size: Optional[int]

    def is_expired(self, now: float) -> bool:
        if self.absolute_deadline is not None and now >= self.absolute_deadline:
            return True
        if self.sliding is not None and now - self.last_access >= self.sliding:
            return True
        return False


class MemoryCacheService:
    """Thread-safe dictionary cache with single-flight creation per key."""

    def __init__(self, size_limit: Optional[int] = None, clock: Callable[[], float] = time.monotonic):
        self._size_limit = size_limit
        self._clock = clock
        self._store: Dict[str, _Entry] = {}
        self._prefix_registry: Dict[str, Set[str]] = {}
        self._lock = threading.RLock()
        self._key_locks: Dict[str, asyncio.Lock] = {}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def try_get(self, key: str) -> Tuple[bool, Any]:
        now = self._clock()
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return False, None
            if entry.is_expired(now):
                self._evict(key)
                return False, None
            entry.last_access = now
            return True, entry.value

    def __contains__(self, key: str) -> bool:
        return self.try_get(key)[0]

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def keys_for_prefix(self, prefix: str) -> Set[str]:
        with self._lock:
            return set(self._prefix_registry.get(prefix, ()))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set(self, key: str, value: Any, options: CacheEntryOptions) -> None:
        now = self._clock()
        entry = _Entry(
            value=value,
            created=now,
            last_access=now,
            absolute_deadline=(
                now + options.absolute_expiration.total_seconds()
                if options.absolute_expiration is not None
                else None
            ),
            sliding=options.sliding_expiration.total_seconds() if options.sliding_expiration is not None else None,
            priority=options.priority,
            size=options.size,
        )
        with self._lock:
            self._store.pop(key, None)
            if not self._make_room(entry):
                logger.debug("cache_entry_rejected", key=key, size=entry.size, size_limit=self._size_limit)
                self._unregister(key)
                return
            self._store[key] = entry
            self._register(key)
        logger.debug("cache_entry_set", key=key)

    async def get_or_create(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        options: CacheEntryOptions,
    ) -> Any:
        found, value = self.try_get(key)
        if found:
            return value

        with self._lock:
            key_lock = self._key_locks.setdefault(key, asyncio.Lock())
        try:
            async with key_lock:
                found, value = self.try_get(key)
                if found:
                    return value
                value = await factory()
                self.set(key, value, options)
                return value
        finally:
            with self._lock:
                if not key_lock.locked() and self._key_locks.get(key) is key_lock:
                    del self._key_locks[key]

    def remove(self, key: str) -> None:
        with self._lock:
            self._evict(key)
        logger.debug("cache_entry_removed", key=key)

    def remove_by_prefix(self, prefix: str) -> None:
        with self._lock:
            keys = list(self._prefix_registry.get(prefix, ()))
            for key in keys:
                self._evict(key)
        if keys:
            logger.debug("cache_prefix_removed", prefix=prefix, count=len(keys))
        else:
            logger.debug("cache_prefix_empty", prefix=prefix)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._prefix_registry.clear()
        logger.debug("cache_cleared")

    # ------------------------------------------------------------------
    # Internals (callers hold ``self._lock``)
    # ------------------------------------------------------------------

    def _register(self, key: str) -> None:
        self._prefix_registry.setdefault(extract_prefix(key), set()).add(key)

    def _unregister(self, key: str) -> None:
        prefix = extract_prefix(key)
        keys = self._prefix_registry.get(prefix)
        if keys is None:
            return
        keys.discard(key)
        if not keys:
            del self._prefix_registry[prefix]

    def _evict(self, key: str) -> None:
        self._store.pop(key, None)
        self._unregister(key)

    def _make_room(self, incoming: _Entry) -> bool:
        """Compact sized entries until ``incoming`` fits under the size limit."""
        if self._size_limit is None or incoming.size is None:
            return True
        if incoming.size > self._size_limit:
            return False

        used = sum(e.size for e in self._store.values() if e.size is not None)
        if used + incoming.size <= self._size_limit:
            return True

        candidates = sorted(
            (
                (key, entry)
                for key, entry in self._store.items()
                if entry.size is not None and entry.priority != CacheItemPriority.NEVER_REMOVE
            ),
            key=lambda item: (item[1].priority, item[1].created),
        )
        for key, entry in candidates:
            self._evict(key)
            used -= entry.size
            if used + incoming.size <= self._size_limit:
                return True
        return used + incoming.size <= self._size_limit
