# medicaledu/core/application/behaviors/performance.py
import time
from typing import Any

import structlog

from medicaledu.core.application.behaviors.base import NextHandler
from medicaledu.core.application.requests import Request
from medicaledu.shared.config import Settings

logger = structlog.get_logger()


class PerformanceMetricsBehavior:
    """Times each request and raises the log level as it gets slower."""

    def __init__(self, settings: Settings):
        self._slow_ms = settings.SLOW_REQUEST_THRESHOLD_MS
        self._moderate_ms = settings.MODERATE_REQUEST_THRESHOLD_MS

    async def handle(self, request: Request, next_: NextHandler) -> Any:
        request_name = type(request).__name__
        logger.debug("request_timing_started", request_type=request_name)
        started = time.perf_counter()
        try:
            response = await next_()
        except Exception as exc:
            logger.error(
                "request_failed",
                request_type=request_name,
                elapsed_ms=self._elapsed_ms(started),
                error=str(exc),
            )
            raise

        elapsed_ms = self._elapsed_ms(started)
        if elapsed_ms > self._slow_ms:
            logger.warning("slow_request", request_type=request_name, elapsed_ms=elapsed_ms)
        elif elapsed_ms > self._moderate_ms:
            logger.info("moderate_request", request_type=request_name, elapsed_ms=elapsed_ms)
        else:
            logger.debug("request_completed", request_type=request_name, elapsed_ms=elapsed_ms)
        return response

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)
