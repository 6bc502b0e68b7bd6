# medicaledu/core/application/behaviors/caching.py
from datetime import timedelta
from typing import Any

import structlog

from medicaledu.core.application.behaviors.base import NextHandler
from medicaledu.core.application.caching import CacheEntryOptions, ICacheService
from medicaledu.core.application.requests import CacheableRequest, Request
from medicaledu.shared.config import Settings

logger = structlog.get_logger()


class CachingBehavior:
    def __init__(self, cache: ICacheService, settings: Settings):
        self._cache = cache
        self._settings = settings

    async def handle(self, request: Request, next_: NextHandler) -> Any:
        request_name = type(request).__name__
        if not isinstance(request, CacheableRequest):
            logger.debug("cache_skipped", request_type=request_name)
            return await next_()

        key = request.resolve_cache_key()
        found, cached = self._cache.try_get(key)
        if found:
            logger.debug("cache_hit", request_type=request_name, key=key)
            return cached

        logger.debug("cache_miss", request_type=request_name, key=key)
        options = CacheEntryOptions(
            absolute_expiration=type(request).cache_duration,
            sliding_expiration=timedelta(seconds=self._settings.CACHE_SLIDING_EXPIRATION_SECONDS),
        )
        response = await self._cache.get_or_create(key, next_, options)
        logger.debug("cache_stored", request_type=request_name, key=key)
        return response
