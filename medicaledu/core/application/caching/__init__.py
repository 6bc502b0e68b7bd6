from medicaledu.core.application.caching.cache_service import (
    CacheEntryOptions,
    CacheItemPriority,
    ICacheService,
)
from medicaledu.core.application.caching.invalidation import (
    CacheInvalidation,
    cache_invalidation,
    get_cache_invalidations,
)
from medicaledu.core.application.caching.memory_cache import MemoryCacheService, extract_prefix
from medicaledu.core.application.caching.prefixes import CachePrefixes

__all__ = [
    "CacheEntryOptions",
    "CacheInvalidation",
    "CacheItemPriority",
    "CachePrefixes",
    "ICacheService",
    "MemoryCacheService",
    "cache_invalidation",
    "extract_prefix",
    "get_cache_invalidations",
]
