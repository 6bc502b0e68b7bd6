# medicaledu/core/application/features/payments/handlers.py
from __future__ import annotations

from typing import List, Optional

import structlog

from medicaledu.core.application.features.payments.models import PaymentResponse
from medicaledu.core.application.features.payments.requests import (
    CancelPaymentCommand,
    CreatePaymentCommand,
    GetPaymentByIdQuery,
    GetPaymentsByUserQuery,
    MarkPaymentFailedCommand,
    MarkPaymentSucceededCommand,
    RefundPaymentCommand,
)
from medicaledu.core.application.mediator import Handler, handles
from medicaledu.core.application.result import Result
from medicaledu.core.domain.entities import Notification, Payment
from medicaledu.core.domain.enums import BookingStatus, NotificationType

logger = structlog.get_logger()


class PaymentHandler(Handler):
    def _get_payment(self, payment_id) -> Optional[Payment]:
        return self.uow.payments.get_by_id(payment_id)

    def _notify(self, payment: Payment, type_: NotificationType, title: str, message: str) -> None:
        self.uow.notifications.add(
            Notification.create(
                user_id=payment.user_id,
                type=type_,
                title=title,
                message=message,
                related_entity_id=payment.id,
                related_entity_type="Payment",
            )
        )


@handles(CreatePaymentCommand)
class CreatePaymentHandler(PaymentHandler):
    def handle(self, request: CreatePaymentCommand) -> Result[PaymentResponse]:
        booking = self.uow.bookings.get_by_id(request.booking_id)
        if booking is None:
            return Result.not_found(f"Booking with ID {request.booking_id} not found.")
        if booking.status == BookingStatus.CANCELLED:
            return Result.failure("Cannot create a payment for a cancelled booking.")

        payment = Payment.create(
            booking_id=booking.id,
            user_id=booking.student_id,
            amount=booking.money,
            provider=request.provider,
            provider_transaction_id=request.provider_transaction_id,
            provider_payment_intent_id=request.provider_payment_intent_id,
        )
        self.uow.payments.add(payment)

        logger.info("payment_created", payment_id=str(payment.id), booking_id=str(booking.id))
        return Result.success(PaymentResponse.from_entity(payment))


@handles(MarkPaymentSucceededCommand)
class MarkPaymentSucceededHandler(PaymentHandler):
    def handle(self, request: MarkPaymentSucceededCommand) -> Result[PaymentResponse]:
        payment = self._get_payment(request.payment_id)
        if payment is None:
            return Result.not_found(f"Payment with ID {request.payment_id} not found.")
        payment.mark_succeeded()
        self._notify(
            payment,
            NotificationType.PAYMENT_CONFIRMATION,
            "Payment received",
            f"We received your payment of {payment.money}.",
        )
        return Result.success(PaymentResponse.from_entity(payment))


@handles(MarkPaymentFailedCommand)
class MarkPaymentFailedHandler(PaymentHandler):
    def handle(self, request: MarkPaymentFailedCommand) -> Result[PaymentResponse]:
        payment = self._get_payment(request.payment_id)
        if payment is None:
            return Result.not_found(f"Payment with ID {request.payment_id} not found.")
        payment.mark_failed(request.reason)
        self._notify(
            payment,
            NotificationType.PAYMENT_FAILED,
            "Payment failed",
            f"Your payment of {payment.money} failed: {payment.failure_reason}",
        )
        logger.warning("payment_failed", payment_id=str(payment.id), reason=payment.failure_reason)
        return Result.success(PaymentResponse.from_entity(payment))


@handles(CancelPaymentCommand)
class CancelPaymentHandler(PaymentHandler):
    def handle(self, request: CancelPaymentCommand) -> Result[PaymentResponse]:
        payment = self._get_payment(request.payment_id)
        if payment is None:
            return Result.not_found(f"Payment with ID {request.payment_id} not found.")
        payment.cancel()
        return Result.success(PaymentResponse.from_entity(payment))


@handles(RefundPaymentCommand)
class RefundPaymentHandler(PaymentHandler):
    def handle(self, request: RefundPaymentCommand) -> Result[PaymentResponse]:
        payment = self._get_payment(request.payment_id)
        if payment is None:
            return Result.not_found(f"Payment with ID {request.payment_id} not found.")
        amount = request.amount if request.amount is not None else payment.amount
        payment.refund(amount, request.reason)
        logger.info("payment_refunded", payment_id=str(payment.id), amount=str(amount))
        return Result.success(PaymentResponse.from_entity(payment))


@handles(GetPaymentByIdQuery)
class GetPaymentByIdHandler(Handler):
    def handle(self, request: GetPaymentByIdQuery) -> Optional[PaymentResponse]:
        payment = self.uow.payments.get_by_id(request.payment_id)
        return PaymentResponse.from_entity(payment) if payment is not None else None


@handles(GetPaymentsByUserQuery)
class GetPaymentsByUserHandler(Handler):
    def handle(self, request: GetPaymentsByUserQuery) -> List[PaymentResponse]:
        payments = self.uow.payments.list_by_user(request.user_id, status=request.status)
        return [PaymentResponse.from_entity(payment) for payment in payments]
