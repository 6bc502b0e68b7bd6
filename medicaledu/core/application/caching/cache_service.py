# medicaledu/core/application/caching/cache_service.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import IntEnum
from typing import Any, Awaitable, Callable, Optional, Protocol, Tuple


class CacheItemPriority(IntEnum):
    LOW = 0
    NORMAL = 1
    HIGH = 2
    NEVER_REMOVE = 3


@dataclass(frozen=True)
class CacheEntryOptions:
    absolute_expiration: Optional[timedelta] = None
    sliding_expiration: Optional[timedelta] = None
    priority: CacheItemPriority = CacheItemPriority.NORMAL
    size: Optional[int] = None


class ICacheService(Protocol):
    """
    Port for the response cache.

    Keys are registered under their prefix so that a whole family of cached
    responses can be dropped at once when a command changes the data behind
    them.
    """

    def try_get(self, key: str) -> Tuple[bool, Any]:
        """Returns ``(True, value)`` on a hit and ``(False, None)`` otherwise."""
        ...

    def set(self, key: str, value: Any, options: CacheEntryOptions) -> None:
        ...

    async def get_or_create(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        options: CacheEntryOptions,
    ) -> Any:
        """Returns the cached value or awaits ``factory`` once per key and caches it."""
        ...

    def remove(self, key: str) -> None:
        ...

    def remove_by_prefix(self, prefix: str) -> None:
        ...

    def clear(self) -> None:
        ...
