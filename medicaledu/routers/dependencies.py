# medicaledu/routers/dependencies.py
from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Type, TypeVar

from dependency_injector.wiring import Provide, inject
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from medicaledu.core.application.exceptions import ResultFailureError
from medicaledu.core.application.mediator import Mediator
from medicaledu.core.application.requests import Request as AppRequest
from medicaledu.core.application.result import Result
from medicaledu.core.domain.exceptions import EntityNotFoundError
from medicaledu.db.session import get_db
from medicaledu.db.unit_of_work import UnitOfWork
from medicaledu.shared.container import Container

T = TypeVar("T")
Q = TypeVar("Q", bound=AppRequest)


@inject
def get_mediator(
    db: Session = Depends(get_db),
    uow_factory: Callable[..., UnitOfWork] = Depends(Provide[Container.unit_of_work.provider]),
    mediator_factory: Callable[..., Mediator] = Depends(Provide[Container.mediator.provider]),
) -> Mediator:
    """One mediator per HTTP request, bound to that request's session."""
    return mediator_factory(uow=uow_factory(session=db))


def unwrap(result: Result[T]) -> T:
    if result.is_failure:
        raise ResultFailureError(result)
    return result.value


def found(value: Optional[T], entity: str, entity_id: Any) -> T:
    if value is None:
        raise EntityNotFoundError(entity, entity_id)
    return value


def query_from_params(query_type: Type[Q], request: Request, **values: Any) -> Q:
    """
    Build a query object from the URL query string.

    Parameters may be given in camelCase or snake_case; ``values`` (usually
    path parameters) take precedence.
    """
    params: Dict[str, Any] = dict(request.query_params)
    params.update(values)
    return query_type.model_validate(params)


__all__ = ["get_db", "get_mediator", "unwrap", "found", "query_from_params"]
