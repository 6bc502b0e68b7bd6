# medicaledu/core/application/features/payments/models.py
from datetime import datetime
from typing import Optional
from uuid import UUID

from medicaledu.core.application.dto import ResponseModel, as_float
from medicaledu.core.domain.entities import Payment


class PaymentResponse(ResponseModel):
    id: UUID
    booking_id: UUID
    user_id: UUID
    amount: float
    currency: str
    status: str
    provider: str
    provider_transaction_id: str
    provider_payment_intent_id: Optional[str] = None
    failure_reason: Optional[str] = None
    processed_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None
    refund_amount: Optional[float] = None
    refund_reason: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, payment: Payment) -> "PaymentResponse":
        return cls(
            id=payment.id,
            booking_id=payment.booking_id,
            user_id=payment.user_id,
            amount=as_float(payment.amount),
            currency=payment.currency,
            status=payment.status.value,
            provider=payment.provider.value,
            provider_transaction_id=payment.provider_transaction_id,
            provider_payment_intent_id=payment.provider_payment_intent_id,
            failure_reason=payment.failure_reason,
            processed_at=payment.processed_at,
            refunded_at=payment.refunded_at,
            refund_amount=as_float(payment.refund_amount),
            refund_reason=payment.refund_reason,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
        )
