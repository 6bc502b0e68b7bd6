# medicaledu/core/application/features/promo_codes/models.py
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from medicaledu.core.application.dto import ResponseModel, as_float
from medicaledu.core.domain.entities import PromoCode


class PromoCodeResponse(ResponseModel):
    id: UUID
    code: str
    description: Optional[str] = None
    discount_type: str
    discount_value: float
    currency: str
    max_uses: Optional[int] = None
    current_uses: int
    valid_from: datetime
    valid_until: datetime
    is_active: bool
    is_currently_valid: bool
    applicable_course_ids: List[UUID]

    @classmethod
    def from_entity(cls, promo: PromoCode) -> "PromoCodeResponse":
        return cls(
            id=promo.id,
            code=promo.code,
            description=promo.description,
            discount_type=promo.discount_type.value,
            discount_value=as_float(promo.discount_value),
            currency=promo.currency,
            max_uses=promo.max_uses,
            current_uses=promo.current_uses,
            valid_from=promo.valid_from,
            valid_until=promo.valid_until,
            is_active=promo.is_active,
            is_currently_valid=promo.is_valid_at(),
            applicable_course_ids=promo.course_ids,
        )
