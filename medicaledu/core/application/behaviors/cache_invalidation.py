# medicaledu/core/application/behaviors/cache_invalidation.py
from typing import Any, List

import structlog

from medicaledu.core.application.behaviors.base import NextHandler
from medicaledu.core.application.caching import ICacheService, get_cache_invalidations
from medicaledu.core.application.exceptions import CacheInvalidationConfigurationError
from medicaledu.core.application.requests import Command, Request
from medicaledu.shared.config import Settings

logger = structlog.get_logger()


class CacheInvalidationBehavior:
    """
    Drops cached query responses after a command has been handled.

    Commands declare what they invalidate with ``@cache_invalidation``. A
    command without a declaration either fails loudly (strict mode) or clears
    the whole cache.
    """

    def __init__(self, cache: ICacheService, settings: Settings):
        self._cache = cache
        self._settings = settings

    def _is_strict(self) -> bool:
        s = self._settings
        if s.CACHE_REQUIRE_EXPLICIT_INVALIDATION:
            return True
        return (
            s.CACHE_THROW_ON_MISSING_INVALIDATION_IN_DEVELOPMENT
            and s.APP_ENV == s.CACHE_STRICT_VALIDATION_ENVIRONMENT
        )

    async def handle(self, request: Request, next_: NextHandler) -> Any:
        request_name = type(request).__name__
        if not isinstance(request, Command):
            logger.debug("cache_invalidation_skipped", request_type=request_name)
            return await next_()

        response = await next_()

        declarations = get_cache_invalidations(type(request))
        if not declarations:
            if self._is_strict():
                logger.error("cache_invalidation_missing", request_type=request_name)
                raise CacheInvalidationConfigurationError(
                    f"Command {request_name} does not declare any cache invalidation. "
                    "Decorate it with @cache_invalidation."
                )
            logger.warning("cache_invalidation_missing_clearing_all", request_type=request_name)
            self._cache.clear()
            return response

        invalidated: List[str] = []
        for declaration in declarations:
            for prefix in declaration.prefixes:
                self._cache.remove_by_prefix(prefix)
                invalidated.append(prefix)
            logger.debug(
                "cache_prefixes_invalidated",
                request_type=request_name,
                prefixes=list(declaration.prefixes),
                reason=declaration.reason,
            )

        logger.info("cache_invalidated", request_type=request_name, prefixes=invalidated)
        return response
