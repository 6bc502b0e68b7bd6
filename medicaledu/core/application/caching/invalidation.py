# medicaledu/core/application/caching/invalidation.py
"""
Declarative cache invalidation for commands.

    @cache_invalidation([CachePrefixes.GET_ALL_COURSES], reason="New course")
    class CreateCourseCommand(Command): ...

The decorator may be stacked. Declarations belong to the decorated class only
and are not inherited by subclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Sequence, Tuple, Type

_declarations: Dict[type, List["CacheInvalidation"]] = {}


@dataclass(frozen=True)
class CacheInvalidation:
    prefixes: Tuple[str, ...]
    reason: str = ""

    def __post_init__(self) -> None:
        if not self.prefixes:
            raise ValueError("At least one cache prefix must be specified.")
        if any(not prefix or not prefix.strip() for prefix in self.prefixes):
            raise ValueError("Cache prefixes cannot be null or empty.")


def cache_invalidation(prefixes: Sequence[str], reason: str = ""):
    """Class decorator declaring the cache prefixes a command invalidates."""
    declaration = CacheInvalidation(prefixes=tuple(prefixes), reason=reason)

    def decorator(cls: Type) -> Type:
        # Decorators apply bottom-up; keep source order.
        _declarations.setdefault(cls, []).insert(0, declaration)
        return cls

    return decorator


@lru_cache(maxsize=None)
def get_cache_invalidations(request_type: type) -> Tuple[CacheInvalidation, ...]:
    return tuple(_declarations.get(request_type, ()))
