# medicaledu/core/application/behaviors/base.py
from typing import Any, Awaitable, Callable, Protocol

from medicaledu.core.application.requests import Request

NextHandler = Callable[[], Awaitable[Any]]


class PipelineBehavior(Protocol):
    async def handle(self, request: Request, next_: NextHandler) -> Any:
        ...
