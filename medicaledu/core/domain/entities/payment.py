# medicaledu/core/domain/entities/payment.py

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Enum as SQLEnum, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medicaledu.core.domain.entities.base import AggregateRoot, Base, UTCDateTime, utcnow
from medicaledu.core.domain.enums import PaymentProvider, PaymentStatus
from medicaledu.core.domain.events import EventType
from medicaledu.core.domain.exceptions import DomainValidationError, InvalidOperationError
from medicaledu.core.domain.value_objects import Currency, Money

if TYPE_CHECKING:
    from medicaledu.core.domain.entities.booking import Booking
    from medicaledu.core.domain.entities.user import User


class Payment(AggregateRoot, Base):
    """A charge against a booking, tracked by provider transaction id only."""

    __tablename__ = "payments"

    booking_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("bookings.id"), index=True, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    status: Mapped[PaymentStatus] = mapped_column(
        SQLEnum(PaymentStatus, name="payment_status_enum"),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    provider: Mapped[PaymentProvider] = mapped_column(
        SQLEnum(PaymentProvider, name="payment_provider_enum"),
        nullable=False,
        default=PaymentProvider.MANUAL,
    )
    provider_transaction_id: Mapped[str] = mapped_column(String(255), nullable=False)
    provider_payment_intent_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    provider_metadata: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    failure_reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    processed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    refunded_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    refund_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    refund_reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    booking: Mapped["Booking"] = relationship("Booking", back_populates="payments")
    user: Mapped["User"] = relationship("User")

    @classmethod
    def create(
        cls,
        *,
        booking_id: uuid.UUID,
        user_id: uuid.UUID,
        amount: Money,
        provider: PaymentProvider,
        provider_transaction_id: str,
        provider_payment_intent_id: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> "Payment":
        if not booking_id:
            raise DomainValidationError("Booking ID is required.")
        if not user_id:
            raise DomainValidationError("User ID is required.")
        if not amount.is_positive:
            raise DomainValidationError("Amount must be positive.")
        if not provider_transaction_id or not provider_transaction_id.strip():
            raise DomainValidationError("Provider transaction ID is required.")

        return cls(
            id=uuid.uuid4(),
            booking_id=booking_id,
            user_id=user_id,
            amount=amount.amount,
            currency=Currency(code=amount.currency).code,
            status=PaymentStatus.PENDING,
            provider=provider,
            provider_transaction_id=provider_transaction_id.strip(),
            provider_payment_intent_id=provider_payment_intent_id,
            created_at=utcnow(),
            created_by=created_by,
        )

    @property
    def money(self) -> Money:
        return Money(amount=self.amount, currency=self.currency)

    def mark_succeeded(self, modified_by: Optional[str] = None) -> None:
        if self.status != PaymentStatus.PENDING:
            raise InvalidOperationError("Only pending payments can be marked as succeeded.")
        self.status = PaymentStatus.SUCCEEDED
        self.processed_at = utcnow()
        self.touch(modified_by)
        self.raise_event(EventType.PAYMENT_SUCCEEDED, booking_id=str(self.booking_id), amount=str(self.money))

    def mark_failed(self, reason: str, modified_by: Optional[str] = None) -> None:
        if self.status != PaymentStatus.PENDING:
            raise InvalidOperationError("Only pending payments can be marked as failed.")
        if not reason or not reason.strip():
            raise DomainValidationError("Failure reason is required.")
        self.status = PaymentStatus.FAILED
        self.failure_reason = reason.strip()
        self.touch(modified_by)
        self.raise_event(EventType.PAYMENT_FAILED, booking_id=str(self.booking_id), reason=self.failure_reason)

    def cancel(self, modified_by: Optional[str] = None) -> None:
        if self.status not in (PaymentStatus.PENDING, PaymentStatus.SUCCEEDED):
            raise InvalidOperationError("Only pending or succeeded payments can be cancelled.")
        self.status = PaymentStatus.CANCELLED
        self.touch(modified_by)

    def refund(self, amount: Decimal, reason: str, modified_by: Optional[str] = None) -> None:
        if self.status != PaymentStatus.SUCCEEDED:
            raise InvalidOperationError("Only succeeded payments can be refunded.")
        if amount is None or amount <= 0 or amount > self.amount:
            raise DomainValidationError(
                "Refund amount must be positive and less than or equal to the payment amount."
            )
        if not reason or not reason.strip():
            raise DomainValidationError("Refund reason is required.")

        self.refund_amount = Decimal(str(amount))
        self.refund_reason = reason.strip()
        self.refunded_at = utcnow()
        self.status = PaymentStatus.REFUNDED if self.refund_amount == self.amount else PaymentStatus.PARTIALLY_REFUNDED
        self.touch(modified_by)
        self.raise_event(EventType.PAYMENT_REFUNDED, amount=str(self.refund_amount), status=self.status.value)
