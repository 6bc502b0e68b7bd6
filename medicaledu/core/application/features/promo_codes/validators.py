# medicaledu/core/application/features/promo_codes/validators.py
from decimal import Decimal
from typing import Iterable, Optional

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from medicaledu.core.application.features.promo_codes.requests import CreatePromoCodeCommand, SetPromoCodeActiveCommand
from medicaledu.core.application.validation import RequestRules, validates
from medicaledu.core.domain.entities.base import ensure_utc
from medicaledu.core.domain.enums import DiscountType
from medicaledu.core.domain.value_objects import PROMO_CODE_PATTERN


def _check_code(value):
    if value is not None and not PROMO_CODE_PATTERN.match("".join(value.split()).upper()):
        raise PydanticCustomError("promo_code", "Must be 4-20 letters or digits")
    return value


@validates(CreatePromoCodeCommand)
class CreatePromoCodeRules(RequestRules):
    code: Optional[str] = None
    discount_value: Decimal = Field(..., gt=0)
    currency: str = Field(..., min_length=3, max_length=3)
    max_uses: Optional[int] = Field(None, gt=0)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator("code")
    @classmethod
    def check_code(cls, value):
        return _check_code(value)


@validates(CreatePromoCodeCommand)
def validate_promo_terms(request: CreatePromoCodeCommand) -> Iterable[str]:
    if request.discount_type == DiscountType.PERCENTAGE and request.discount_value > Decimal("100"):
        yield "Percentage discount cannot exceed 100."
    if ensure_utc(request.valid_until) <= ensure_utc(request.valid_from):
        yield "Valid until must be after valid from."


@validates(SetPromoCodeActiveCommand)
class SetPromoCodeActiveRules(RequestRules):
    code: str

    @field_validator("code")
    @classmethod
    def check_code(cls, value):
        return _check_code(value)
