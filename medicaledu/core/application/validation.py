# medicaledu/core/application/validation.py
"""
Validator registry.

Field rules are declared as pydantic constraints on a ``RequestRules`` model
that mirrors the request's fields. The model is validated from the request's
attributes and every error is flattened into one message:

    @validates(CreateCourseCommand)
    class CreateCourseRules(RequestRules):
        title: str = Field(..., min_length=1, max_length=200)

Rules spanning several fields (or needing a domain value object) are plain
functions that receive the request and yield one message per broken rule:

    @validates(CreateCourseCommand)
    def validate_create_course(request):
        if request.min_price > request.max_price:
            yield "Minimum price cannot be greater than maximum price."
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Sequence, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_core import PydanticCustomError

from medicaledu.core.domain.value_objects import is_valid_url

Validator = Callable[[object], Iterable[str]]

_validators: Dict[type, List[Validator]] = {}


def describe_location(loc: Sequence[Union[str, int]]) -> str:
    """``("materials", 0, "file_url")`` -> ``"Materials 1 file url"``."""
    parts = [str(part + 1) if isinstance(part, int) else str(part).replace("_", " ") for part in loc]
    return " ".join(parts).capitalize()


def flatten_errors(exc: ValidationError) -> List[str]:
    messages = []
    for error in exc.errors(include_url=False):
        label = describe_location(error["loc"])
        messages.append(f"{label}: {error['msg']}" if label else error["msg"])
    return messages


class RequestRules(BaseModel):
    """Field constraints for one request type, checked against the request's attributes."""

    model_config = ConfigDict(str_strip_whitespace=True, from_attributes=True)

    @classmethod
    def check(cls, request: Any) -> List[str]:
        try:
            cls.model_validate(request, from_attributes=True)
        except ValidationError as exc:
            return flatten_errors(exc)
        return []


class PageRules(RequestRules):
    page: int = Field(0, ge=0)
    page_size: int = Field(20, ge=1, le=100)


def url_or_none(value: Any) -> Any:
    """``field_validator`` body for optional http(s) URLs."""
    if value and not is_valid_url(value):
        raise PydanticCustomError("url", "Must be a valid http(s) URL")
    return value


def validates(request_type: Type) -> Callable[[Any], Any]:
    """Register a ``RequestRules`` model or a rule function for ``request_type``."""

    def decorator(target: Any) -> Any:
        if isinstance(target, type) and issubclass(target, RequestRules):
            _validators.setdefault(request_type, []).append(target.check)
        else:
            _validators.setdefault(request_type, []).append(target)
        return target

    return decorator


def get_validators(request_type: Type) -> List[Validator]:
    return list(_validators.get(request_type, ()))


def run_validators(request: object) -> List[str]:
    """Run every validator registered for ``type(request)`` and collect all messages."""
    errors: List[str] = []
    for validator in get_validators(type(request)):
        errors.extend(message for message in validator(request) or () if message)
    return errors
