# medicaledu/core/application/features/promo_codes/handlers.py
from __future__ import annotations

from typing import List, Optional

import structlog

from medicaledu.core.application.features.promo_codes.models import PromoCodeResponse
from medicaledu.core.application.features.promo_codes.requests import (
    CreatePromoCodeCommand,
    GetPromoCodeQuery,
    GetPromoCodesQuery,
    SetPromoCodeActiveCommand,
)
from medicaledu.core.application.mediator import Handler, handles
from medicaledu.core.application.result import Result
from medicaledu.core.domain.entities import PromoCode
from medicaledu.core.domain.value_objects import PromoCodeValue

logger = structlog.get_logger()


@handles(CreatePromoCodeCommand)
class CreatePromoCodeHandler(Handler):
    def handle(self, request: CreatePromoCodeCommand) -> Result[PromoCodeResponse]:
        code = PromoCodeValue(value=request.code).value if request.code else PromoCodeValue.generate().value
        if self.uow.promo_codes.get_by_code(code) is not None:
            return Result.conflict(f"Promo code {code} already exists.")

        for course_id in request.applicable_course_ids:
            if not self.uow.courses.exists(course_id):
                return Result.not_found(f"Course with ID {course_id} not found.")

        promo = PromoCode.create(
            code=code,
            discount_type=request.discount_type,
            discount_value=request.discount_value,
            valid_from=request.valid_from,
            valid_until=request.valid_until,
            currency=request.currency,
            max_uses=request.max_uses,
            description=request.description,
            applicable_course_ids=list(request.applicable_course_ids),
        )
        self.uow.promo_codes.add(promo)

        logger.info("promo_code_created", code=promo.code, discount_type=promo.discount_type.value)
        return Result.success(PromoCodeResponse.from_entity(promo))


@handles(SetPromoCodeActiveCommand)
class SetPromoCodeActiveHandler(Handler):
    def handle(self, request: SetPromoCodeActiveCommand) -> Result[PromoCodeResponse]:
        promo = self.uow.promo_codes.get_by_code(request.code)
        if promo is None:
            return Result.not_found(f"Promo code {request.code.strip().upper()} not found.")
        promo.set_active(request.is_active)
        return Result.success(PromoCodeResponse.from_entity(promo))


@handles(GetPromoCodeQuery)
class GetPromoCodeHandler(Handler):
    def handle(self, request: GetPromoCodeQuery) -> Optional[PromoCodeResponse]:
        promo = self.uow.promo_codes.get_by_code(request.code)
        return PromoCodeResponse.from_entity(promo) if promo is not None else None


@handles(GetPromoCodesQuery)
class GetPromoCodesHandler(Handler):
    def handle(self, request: GetPromoCodesQuery) -> List[PromoCodeResponse]:
        return [PromoCodeResponse.from_entity(p) for p in self.uow.promo_codes.list_codes(active_only=request.active_only)]
