# medicaledu/core/application/mediator.py
"""
Request dispatch.

Handlers are classes registered against exactly one request type:

    @handles(GetCourseByIdQuery)
    class GetCourseByIdHandler(Handler):
        def handle(self, request): ...

``Mediator.send`` wraps the handler in the pipeline behaviors, outermost
first: Validation, Caching, PerformanceMetrics, Transaction,
CacheInvalidation, Logging.

Handlers are synchronous: they work on the SQLAlchemy session, so the
mediator runs them in the threadpool and keeps the event loop free.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Callable, Dict, Optional, Sequence, Type

import structlog
from fastapi.concurrency import run_in_threadpool

from medicaledu.core.application.behaviors import (
    CacheInvalidationBehavior,
    CachingBehavior,
    LoggingBehavior,
    PerformanceMetricsBehavior,
    PipelineBehavior,
    TransactionBehavior,
    ValidationBehavior,
)
from medicaledu.core.application.caching import ICacheService
from medicaledu.core.application.exceptions import HandlerNotFoundError
from medicaledu.core.application.requests import Request
from medicaledu.db.unit_of_work import UnitOfWork
from medicaledu.shared.config import Settings
from medicaledu.shared.telemetry import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)


class Handler:
    """Base class for request handlers; one instance per dispatched request."""

    def __init__(self, uow: UnitOfWork, settings: Settings):
        self.uow = uow
        self.settings = settings

    def handle(self, request: Any) -> Any:
        raise NotImplementedError


_handlers: Dict[type, Type[Handler]] = {}


def handles(request_type: Type[Request]) -> Callable[[Type[Handler]], Type[Handler]]:
    def decorator(handler_cls: Type[Handler]) -> Type[Handler]:
        existing = _handlers.get(request_type)
        if existing is not None and existing is not handler_cls:
            raise ValueError(
                f"{request_type.__name__} already handled by {existing.__name__}."
            )
        _handlers[request_type] = handler_cls
        return handler_cls

    return decorator


def get_handler(request_type: type) -> Type[Handler]:
    try:
        return _handlers[request_type]
    except KeyError:
        raise HandlerNotFoundError(request_type) from None


class Mediator:
    def __init__(
        self,
        uow: UnitOfWork,
        cache: ICacheService,
        settings: Settings,
        behaviors: Optional[Sequence[PipelineBehavior]] = None,
    ):
        self._uow = uow
        self._cache = cache
        self._settings = settings
        self._behaviors = behaviors

    def pipeline(self) -> Sequence[PipelineBehavior]:
        if self._behaviors is not None:
            return self._behaviors
        return (
            ValidationBehavior(),
            CachingBehavior(self._cache, self._settings),
            PerformanceMetricsBehavior(self._settings),
            TransactionBehavior(self._uow),
            CacheInvalidationBehavior(self._cache, self._settings),
            LoggingBehavior(),
        )

    async def send(self, request: Request) -> Any:
        request_type = type(request)
        handler = get_handler(request_type)(self._uow, self._settings)

        chain = partial(run_in_threadpool, handler.handle, request)
        for behavior in reversed(self.pipeline()):
            chain = partial(behavior.handle, request, chain)

        with tracer.start_as_current_span("mediator.send") as span:
            span.set_attribute("app.request_type", request_type.__name__)
            logger.debug("request_dispatched", request_type=request_type.__name__, handler=type(handler).__name__)
            return await chain()
