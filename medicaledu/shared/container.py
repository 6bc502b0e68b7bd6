# medicaledu/shared/container.py
from dependency_injector import containers, providers

from medicaledu.core.application.caching import MemoryCacheService
from medicaledu.core.application.mediator import Mediator
from medicaledu.db.unit_of_work import UnitOfWork
from medicaledu.shared.config import settings as app_settings


class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.

    The cache lives for the whole process; the unit of work and the mediator
    are built per request around the request's database session.
    """

    settings = providers.Object(app_settings)

    cache_service = providers.Singleton(
        MemoryCacheService,
        size_limit=settings.provided.CACHE_SIZE_LIMIT,
    )

    unit_of_work = providers.Factory(
        UnitOfWork,
        retry_attempts=settings.provided.DB_RETRY_ATTEMPTS,
    )

    mediator = providers.Factory(
        Mediator,
        cache=cache_service,
        settings=settings,
    )
