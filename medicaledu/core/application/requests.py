# medicaledu/core/application/requests.py
"""
Request types dispatched through the mediator.

A request is an immutable pydantic model. Its ``response_type`` documents what
the handler returns; the validation behavior uses it to decide between
returning ``Result.validation_failure`` and raising.
"""

from __future__ import annotations

import hashlib
from datetime import timedelta
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Request(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    response_type: ClassVar[Any] = Any


class Command(Request):
    """A request that changes state. Only commands run inside a transaction."""


class CacheableRequest(Request):
    """A query whose response may be served from the cache."""

    cache_duration: ClassVar[timedelta] = timedelta(minutes=5)
    cache_prefix: ClassVar[Optional[str]] = None

    def get_cache_key(self) -> Optional[str]:
        """Override to supply an explicit key; ``None`` uses the hashed default."""
        return None

    def hashed_key(self, prefix: str) -> str:
        """``{prefix}_{SHA-256 of the camelCase JSON}`` in upper-case hex."""
        digest = hashlib.sha256(self.model_dump_json(by_alias=True).encode("utf-8")).hexdigest().upper()
        return f"{prefix}_{digest}"

    def resolve_cache_key(self) -> str:
        explicit = self.get_cache_key()
        if explicit:
            return explicit
        return self.hashed_key(type(self).cache_prefix or type(self).__name__)
