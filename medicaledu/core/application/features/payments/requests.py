# medicaledu/core/application/features/payments/requests.py
from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import ClassVar, List, Optional
from uuid import UUID

from medicaledu.core.application.caching import CachePrefixes, cache_invalidation
from medicaledu.core.application.features.payments.models import PaymentResponse
from medicaledu.core.application.requests import CacheableRequest, Command, Request
from medicaledu.core.application.result import Result
from medicaledu.core.domain.enums import PaymentProvider, PaymentStatus

PAYMENT_LISTINGS = (CachePrefixes.GET_PAYMENTS, CachePrefixes.GET_PAYMENTS_BY_USER)
NOTIFICATION_LISTINGS = (CachePrefixes.GET_NOTIFICATIONS, CachePrefixes.GET_NOTIFICATIONS_BY_USER)


@cache_invalidation(PAYMENT_LISTINGS, reason="New payment appears in payment listings")
class CreatePaymentCommand(Command):
    response_type: ClassVar = Result[PaymentResponse]

    booking_id: UUID
    provider: PaymentProvider = PaymentProvider.MANUAL
    provider_transaction_id: str
    provider_payment_intent_id: Optional[str] = None


@cache_invalidation(PAYMENT_LISTINGS, reason="Payment status changes")
@cache_invalidation(NOTIFICATION_LISTINGS, reason="Payment confirmation notification")
class MarkPaymentSucceededCommand(Command):
    response_type: ClassVar = Result[PaymentResponse]

    payment_id: UUID


@cache_invalidation(PAYMENT_LISTINGS, reason="Payment status changes")
@cache_invalidation(NOTIFICATION_LISTINGS, reason="Payment failure notification")
class MarkPaymentFailedCommand(Command):
    response_type: ClassVar = Result[PaymentResponse]

    payment_id: UUID
    reason: str


@cache_invalidation(PAYMENT_LISTINGS, reason="Payment status changes")
class CancelPaymentCommand(Command):
    response_type: ClassVar = Result[PaymentResponse]

    payment_id: UUID


@cache_invalidation(PAYMENT_LISTINGS, reason="Payment status changes")
class RefundPaymentCommand(Command):
    """Refund ``amount`` of a succeeded payment; the full amount when omitted."""

    response_type: ClassVar = Result[PaymentResponse]

    payment_id: UUID
    reason: str
    amount: Optional[Decimal] = None


class GetPaymentByIdQuery(Request):
    response_type: ClassVar = Optional[PaymentResponse]

    payment_id: UUID


class GetPaymentsByUserQuery(CacheableRequest):
    response_type: ClassVar = List[PaymentResponse]
    cache_duration: ClassVar[timedelta] = timedelta(minutes=5)
    cache_prefix: ClassVar[str] = CachePrefixes.GET_PAYMENTS_BY_USER

    user_id: UUID
    status: Optional[PaymentStatus] = None
