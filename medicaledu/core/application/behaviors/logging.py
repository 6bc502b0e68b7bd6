# medicaledu/core/application/behaviors/logging.py
import time
from typing import Any

import structlog

from medicaledu.core.application.behaviors.base import NextHandler
from medicaledu.core.application.requests import Request

logger = structlog.get_logger()


class LoggingBehavior:
    async def handle(self, request: Request, next_: NextHandler) -> Any:
        request_name = type(request).__name__
        logger.info("handling", request_type=request_name)
        started = time.perf_counter()
        response = await next_()
        logger.info(
            "handled",
            request_type=request_name,
            elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response
