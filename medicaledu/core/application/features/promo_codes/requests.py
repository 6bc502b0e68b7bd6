# medicaledu/core/application/features/promo_codes/requests.py
from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import ClassVar, List, Optional
from uuid import UUID

from medicaledu.core.application.caching import CachePrefixes, cache_invalidation
from medicaledu.core.application.features.promo_codes.models import PromoCodeResponse
from medicaledu.core.application.requests import CacheableRequest, Command, Request
from medicaledu.core.application.result import Result
from medicaledu.core.domain.enums import DiscountType

PROMO_CODE_LISTINGS = (CachePrefixes.GET_PROMO_CODES,)


@cache_invalidation(PROMO_CODE_LISTINGS, reason="New promo code appears in promo code listings")
class CreatePromoCodeCommand(Command):
    response_type: ClassVar = Result[PromoCodeResponse]

    code: Optional[str] = None
    discount_type: DiscountType
    discount_value: Decimal
    valid_from: datetime
    valid_until: datetime
    currency: str = "USD"
    max_uses: Optional[int] = None
    description: Optional[str] = None
    applicable_course_ids: List[UUID] = []


@cache_invalidation(PROMO_CODE_LISTINGS, reason="Promo code availability changes")
class SetPromoCodeActiveCommand(Command):
    response_type: ClassVar = Result[PromoCodeResponse]

    code: str
    is_active: bool


class GetPromoCodeQuery(Request):
    response_type: ClassVar = Optional[PromoCodeResponse]

    code: str


class GetPromoCodesQuery(CacheableRequest):
    response_type: ClassVar = List[PromoCodeResponse]
    cache_duration: ClassVar[timedelta] = timedelta(minutes=5)
    cache_prefix: ClassVar[str] = CachePrefixes.GET_PROMO_CODES

    active_only: bool = False
