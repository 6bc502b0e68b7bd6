# medicaledu/core/application/behaviors/validation.py
from typing import Any

import structlog

from medicaledu.core.application.behaviors.base import NextHandler
from medicaledu.core.application.exceptions import RequestValidationError
from medicaledu.core.application.requests import Request
from medicaledu.core.application.result import Result, is_result_type
from medicaledu.core.application.validation import run_validators

logger = structlog.get_logger()


class ValidationBehavior:
    """
    Runs every registered validator before the handler.

    Requests answering with ``Result[...]`` get a validation failure back;
    any other request raises ``RequestValidationError``.
    """

    async def handle(self, request: Request, next_: NextHandler) -> Any:
        errors = run_validators(request)
        if not errors:
            return await next_()

        request_type = type(request)
        logger.warning("request_validation_failed", request_type=request_type.__name__, errors=errors)

        if is_result_type(request_type.response_type):
            return Result.validation_failure(errors)
        raise RequestValidationError(errors)
