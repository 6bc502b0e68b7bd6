# medicaledu/shared/resilience.py
import structlog
from typing import Any, Awaitable, Callable, Optional, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from medicaledu.shared.config import settings

logger = structlog.get_logger()

T = TypeVar("T")


def is_transient_db_error(exc: BaseException) -> bool:
    """
    Connection drops, deadlocks and serialization failures are worth a retry.
    Constraint violations and programming errors are not.
    """
    if isinstance(exc, OperationalError):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "db_operation_retry",
        attempt=retry_state.attempt_number,
        error=str(exc),
    )


def retry_transient_db(
    func: Callable[..., Awaitable[T]],
    attempts: Optional[int] = None,
) -> Callable[..., Awaitable[T]]:
    """
    Execution strategy for database work.
    Strategy:
    - Wait: Exponential Backoff (0.1s, 0.2s, 0.4s...) up to 2s.
    - Stop: After DB_RETRY_ATTEMPTS attempts.
    - Retry: Only transient database errors.
    """
    return retry(
        stop=stop_after_attempt(attempts or settings.DB_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        retry=retry_if_exception(is_transient_db_error),
        before_sleep=_log_retry,
        reraise=True,
    )(func)


async def execute_with_retry(operation: Callable[[], Awaitable[Any]], attempts: Optional[int] = None) -> Any:
    return await retry_transient_db(operation, attempts)()
