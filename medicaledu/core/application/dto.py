# medicaledu/core/application/dto.py
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ResponseModel(BaseModel):
    """
    Base for handler responses.

    Responses may be shared by the cache across requests, so they are frozen.
    Money is exposed as ``float`` for JSON clients.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)


def as_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None
