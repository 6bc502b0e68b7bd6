# medicaledu/core/application/exceptions.py

from typing import Any, List, Sequence


class ApplicationError(Exception):
    """Base class for failures raised by the request pipeline."""


class RequestValidationError(ApplicationError):
    """One or more validators rejected a request."""

    def __init__(self, errors: Sequence[str]):
        self.errors: List[str] = list(errors)
        super().__init__("; ".join(self.errors) or "Validation failed.")


class ResultFailureError(ApplicationError):
    """A handler returned a failed ``Result`` where a value was required."""

    def __init__(self, result: Any):
        self.result = result
        super().__init__("; ".join(result.errors) or "Operation failed.")


class HandlerNotFoundError(ApplicationError):
    def __init__(self, request_type: type):
        self.request_type = request_type
        super().__init__(f"No handler registered for {request_type.__name__}.")


class CacheInvalidationConfigurationError(ApplicationError):
    """A command declares no cache invalidation while strict mode is on."""
