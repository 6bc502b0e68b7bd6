# medicaledu/core/application/behaviors/transaction.py
from typing import Any, List

import structlog
from fastapi.concurrency import run_in_threadpool

from medicaledu.core.application.behaviors.base import NextHandler
from medicaledu.core.application.requests import Command, Request
from medicaledu.core.domain.events import DomainEvent
from medicaledu.db.unit_of_work import UnitOfWork

logger = structlog.get_logger()


class TransactionBehavior:
    """
    Runs a command inside one database transaction.

    The whole attempt (begin, handler, flush, commit) is retried by the unit of
    work's execution strategy when the database reports a transient failure.
    Session calls block, so they run in the threadpool.
    """

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, request: Request, next_: NextHandler) -> Any:
        if not isinstance(request, Command):
            return await next_()

        request_name = type(request).__name__

        async def attempt() -> Any:
            await run_in_threadpool(self._uow.begin)
            try:
                response = await next_()
                await run_in_threadpool(self._uow.save_changes)
                events = self._uow.collect_domain_events()
                await run_in_threadpool(self._uow.commit)
            except Exception:
                await run_in_threadpool(self._uow.rollback)
                raise
            self._log_events(request_name, events)
            return response

        try:
            return await self._uow.execute(attempt)
        except Exception as exc:
            logger.error("transaction_rolled_back", request_type=request_name, error=str(exc))
            raise

    @staticmethod
    def _log_events(request_name: str, events: List[DomainEvent]) -> None:
        for event in events:
            logger.info(
                "domain_event",
                request_type=request_name,
                event_type=event.type,
                aggregate_id=str(event.aggregate_id),
                payload=event.payload,
            )
