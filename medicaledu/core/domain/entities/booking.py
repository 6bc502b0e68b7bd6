# medicaledu/core/domain/entities/booking.py

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Enum as SQLEnum, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medicaledu.core.domain.entities.base import AggregateRoot, Base, UTCDateTime, utcnow
from medicaledu.core.domain.enums import BookingStatus
from medicaledu.core.domain.events import EventType
from medicaledu.core.domain.exceptions import DomainValidationError, InvalidOperationError
from medicaledu.core.domain.value_objects import Currency, Money

if TYPE_CHECKING:
    from medicaledu.core.domain.entities.availability_slot import AvailabilitySlot
    from medicaledu.core.domain.entities.payment import Payment
    from medicaledu.core.domain.entities.user import User

CANCELLATION_WINDOW = timedelta(hours=24)
LATE_CANCELLATION_REFUND_FACTOR = Decimal("0.5")

# A rescheduled booking holds its new seat exactly like a confirmed one.
SEATED_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.RESCHEDULED)
CANCELLABLE_STATUSES = (BookingStatus.PENDING,) + SEATED_STATUSES


class Booking(AggregateRoot, Base):
    """
    A student's seat on an availability slot.

    Lifecycle: Pending -> Confirmed -> Completed | NoShow, with Cancelled
    reachable from Pending and Confirmed. Rescheduled behaves as Confirmed
    on the new slot and may be rescheduled again.
    """

    __tablename__ = "bookings"

    student_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    availability_slot_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("availability_slots.id"), index=True, nullable=False
    )
    status: Mapped[BookingStatus] = mapped_column(
        SQLEnum(BookingStatus, name="booking_status_enum"),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    discount_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    promo_code_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("promo_codes.id"), nullable=True)

    student_notes: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    instructor_notes: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    meeting_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    confirmed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    rescheduled_from_slot_id: Mapped[Optional[uuid.UUID]] = mapped_column(nullable=True)

    student: Mapped["User"] = relationship("User")
    slot: Mapped["AvailabilitySlot"] = relationship("AvailabilitySlot", back_populates="bookings")
    payments: Mapped[List["Payment"]] = relationship("Payment", back_populates="booking")

    @classmethod
    def create(
        cls,
        *,
        student_id: uuid.UUID,
        availability_slot_id: uuid.UUID,
        amount: Money,
        notes: Optional[str] = None,
        discount_amount: Decimal = Decimal("0"),
        promo_code_id: Optional[uuid.UUID] = None,
        created_by: Optional[str] = None,
    ) -> "Booking":
        if not student_id:
            raise DomainValidationError("Student ID is required.")
        if not availability_slot_id:
            raise DomainValidationError("Availability slot ID is required.")
        if amount.is_zero:
            raise DomainValidationError("Booking amount cannot be zero")

        booking = cls(
            id=uuid.uuid4(),
            student_id=student_id,
            availability_slot_id=availability_slot_id,
            status=BookingStatus.PENDING,
            amount=amount.amount,
            currency=Currency(code=amount.currency).code,
            discount_amount=discount_amount,
            promo_code_id=promo_code_id,
            student_notes=notes,
            created_at=utcnow(),
            created_by=created_by,
        )
        booking.raise_event(
            EventType.BOOKING_CREATED,
            student_id=str(student_id),
            slot_id=str(availability_slot_id),
            amount=str(amount),
        )
        return booking

    @property
    def money(self) -> Money:
        return Money(amount=self.amount, currency=self.currency)

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def confirm(self) -> None:
        if self.status != BookingStatus.PENDING:
            raise InvalidOperationError("Only pending bookings can be confirmed.")
        self.status = BookingStatus.CONFIRMED
        self.confirmed_at = utcnow()
        self.touch()
        self.raise_event(EventType.BOOKING_CONFIRMED, student_id=str(self.student_id))

    def cancel(self, reason: str) -> None:
        if self.status not in CANCELLABLE_STATUSES:
            raise InvalidOperationError("Only pending or confirmed bookings can be cancelled.")
        if not reason or not reason.strip():
            raise DomainValidationError("Cancellation reason is required.")
        self.status = BookingStatus.CANCELLED
        self.cancellation_reason = reason.strip()
        self.cancelled_at = utcnow()
        self.touch()
        self.raise_event(EventType.BOOKING_CANCELLED, student_id=str(self.student_id), reason=self.cancellation_reason)

    def complete(self) -> None:
        if self.status not in SEATED_STATUSES:
            raise InvalidOperationError("Only confirmed bookings can be completed.")
        self.status = BookingStatus.COMPLETED
        self.touch()
        self.raise_event(EventType.BOOKING_COMPLETED, student_id=str(self.student_id))

    def mark_no_show(self) -> None:
        if self.status not in SEATED_STATUSES:
            raise InvalidOperationError("Only confirmed bookings can be marked as no-show.")
        self.status = BookingStatus.NO_SHOW
        self.touch()
        self.raise_event(EventType.BOOKING_NO_SHOW, student_id=str(self.student_id))

    def reschedule(self, new_slot_id: uuid.UUID) -> None:
        if self.status not in SEATED_STATUSES:
            raise InvalidOperationError("Only confirmed bookings can be rescheduled.")
        if new_slot_id == self.availability_slot_id:
            raise DomainValidationError("New slot must differ from the current slot.")
        previous = self.availability_slot_id
        self.status = BookingStatus.RESCHEDULED
        self.rescheduled_from_slot_id = previous
        self.availability_slot_id = new_slot_id
        self.touch()
        self.raise_event(EventType.BOOKING_RESCHEDULED, from_slot_id=str(previous), to_slot_id=str(new_slot_id))

    def set_student_notes(self, notes: Optional[str]) -> None:
        self.student_notes = notes
        self.touch()

    def set_instructor_notes(self, notes: Optional[str]) -> None:
        self.instructor_notes = notes
        self.touch()

    def set_meeting_url(self, url: Optional[str]) -> None:
        self.meeting_url = url
        self.touch()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def can_be_cancelled(self) -> bool:
        return self.status in CANCELLABLE_STATUSES

    def can_be_confirmed(self) -> bool:
        return self.status == BookingStatus.PENDING

    def can_be_completed(self) -> bool:
        return self.status in SEATED_STATUSES

    @property
    def is_active(self) -> bool:
        return self.status in CANCELLABLE_STATUSES

    def _session_start(self) -> Optional[datetime]:
        return self.slot.start_time_utc if self.slot is not None else None

    def is_in_past(self, now: Optional[datetime] = None) -> bool:
        start = self._session_start()
        return start is not None and start < (now or utcnow())

    def is_upcoming(self, now: Optional[datetime] = None) -> bool:
        start = self._session_start()
        return start is not None and start > (now or utcnow())

    def time_until_session(self, now: Optional[datetime] = None) -> timedelta:
        start = self._session_start()
        if start is None:
            return timedelta(0)
        return start - (now or utcnow())

    def is_within_cancellation_window(self, now: Optional[datetime] = None) -> bool:
        """True while cancellation is still at least 24 hours ahead of the session."""
        start = self._session_start()
        if start is None:
            return False
        return (now or utcnow()) < start - CANCELLATION_WINDOW

    def refund_amount(self, now: Optional[datetime] = None) -> Money:
        if self.status != BookingStatus.CANCELLED:
            return Money.zero(self.currency)
        # Refunds are judged at the moment of cancellation when it is known.
        moment = now or self.cancelled_at
        if self.is_within_cancellation_window(moment):
            return self.money
        return self.money.multiply(LATE_CANCELLATION_REFUND_FACTOR)
