# medicaledu/core/application/result.py
from __future__ import annotations

from enum import Enum
from typing import Any, Generic, Iterable, Optional, Tuple, TypeVar, get_origin

T = TypeVar("T")


class ErrorType(str, Enum):
    NONE = "none"
    FAILURE = "failure"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    CONFLICT = "conflict"
    VALIDATION = "validation"


class Result(Generic[T]):
    """
    Outcome of an operation that can fail without raising.

    ``error_type`` tells the HTTP layer which status code a failure maps to.
    """

    __slots__ = ("is_success", "value", "errors", "error_type")

    def __init__(
        self,
        is_success: bool,
        value: Optional[T] = None,
        errors: Tuple[str, ...] = (),
        error_type: ErrorType = ErrorType.NONE,
    ) -> None:
        self.is_success = is_success
        self.value = value
        self.errors = tuple(errors)
        self.error_type = error_type

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.success({self.value!r})"
        return f"Result.{self.error_type.value}({list(self.errors)!r})"

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    def try_get_value(self) -> Tuple[bool, Optional[T]]:
        return self.is_success, (self.value if self.is_success else None)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(True, value)

    @classmethod
    def failure(cls, *errors: str) -> "Result[T]":
        return cls(False, errors=errors, error_type=ErrorType.FAILURE)

    @classmethod
    def not_found(cls, error_message: str = "Entity Not Found") -> "Result[T]":
        return cls(False, errors=(error_message,), error_type=ErrorType.NOT_FOUND)

    @classmethod
    def unauthorized(cls, error_message: str = "Unauthorized access") -> "Result[T]":
        return cls(False, errors=(error_message,), error_type=ErrorType.UNAUTHORIZED)

    @classmethod
    def conflict(cls, error_message: str = "Entity already exists") -> "Result[T]":
        return cls(False, errors=(error_message,), error_type=ErrorType.CONFLICT)

    @classmethod
    def validation_failure(cls, errors: Iterable[str]) -> "Result[T]":
        return cls(False, errors=tuple(errors), error_type=ErrorType.VALIDATION)


def is_result_type(response_type: Any) -> bool:
    """True when ``response_type`` is ``Result`` or a parametrised ``Result[...]``."""
    return (get_origin(response_type) or response_type) is Result
