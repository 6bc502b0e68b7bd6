# medicaledu/core/application/features/payments/validators.py
from decimal import Decimal
from typing import Optional

from pydantic import Field

from medicaledu.core.application.features.payments.requests import (
    CreatePaymentCommand,
    MarkPaymentFailedCommand,
    RefundPaymentCommand,
)
from medicaledu.core.application.validation import RequestRules, validates


@validates(CreatePaymentCommand)
class CreatePaymentRules(RequestRules):
    provider_transaction_id: str = Field(..., min_length=1, max_length=255)
    provider_payment_intent_id: Optional[str] = Field(None, max_length=255)


@validates(MarkPaymentFailedCommand)
class MarkPaymentFailedRules(RequestRules):
    reason: str = Field(..., min_length=1, max_length=500)


@validates(RefundPaymentCommand)
class RefundPaymentRules(RequestRules):
    reason: str = Field(..., min_length=1, max_length=500)
    amount: Optional[Decimal] = Field(None, gt=0)
