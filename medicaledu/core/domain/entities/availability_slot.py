# medicaledu/core/domain/entities/availability_slot.py

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medicaledu.core.domain.entities.base import AggregateRoot, Base, UTCDateTime, ensure_utc, utcnow
from medicaledu.core.domain.events import EventType
from medicaledu.core.domain.exceptions import DomainValidationError, InvalidOperationError
from medicaledu.core.domain.value_objects import Currency, Money

if TYPE_CHECKING:
    from medicaledu.core.domain.entities.booking import Booking
    from medicaledu.core.domain.entities.course import Course
    from medicaledu.core.domain.entities.user import User


class AvailabilitySlot(AggregateRoot, Base):
    """
    A bookable time window an instructor opens for a course.

    ``is_booked`` flips on the first booking; further participants are added
    until ``max_participants`` is reached.
    """

    __tablename__ = "availability_slots"

    course_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("courses.id", ondelete="CASCADE"), index=True)
    instructor_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True)
    start_time_utc: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, index=True)
    end_time_utc: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    is_booked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    max_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    current_participants: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recurring_pattern: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    course: Mapped["Course"] = relationship("Course", back_populates="availability_slots")
    instructor: Mapped["User"] = relationship("User")
    bookings: Mapped[List["Booking"]] = relationship("Booking", back_populates="slot")

    @classmethod
    def create(
        cls,
        *,
        course_id: uuid.UUID,
        instructor_id: uuid.UUID,
        start_time_utc: datetime,
        end_time_utc: datetime,
        price: Decimal,
        currency: str = "USD",
        max_participants: int = 1,
        notes: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> "AvailabilitySlot":
        if not course_id:
            raise DomainValidationError("Course ID is required.")
        if not instructor_id:
            raise DomainValidationError("Instructor ID is required.")
        start_time_utc = ensure_utc(start_time_utc)
        end_time_utc = ensure_utc(end_time_utc)
        if end_time_utc <= start_time_utc:
            raise DomainValidationError("End time must be after start time.")
        if price is None or price < 0:
            raise DomainValidationError("Price cannot be negative.")
        if max_participants <= 0:
            raise DomainValidationError("Max participants must be positive.")

        slot = cls(
            id=uuid.uuid4(),
            course_id=course_id,
            instructor_id=instructor_id,
            start_time_utc=start_time_utc,
            end_time_utc=end_time_utc,
            is_booked=False,
            price=Decimal(str(price)),
            currency=Currency(code=currency).code,
            max_participants=max_participants,
            current_participants=0,
            notes=notes,
            is_recurring=False,
            created_at=utcnow(),
            created_by=created_by,
        )
        slot.raise_event(EventType.SLOT_CREATED, course_id=str(course_id), instructor_id=str(instructor_id))
        return slot

    # ------------------------------------------------------------------
    # Capacity
    # ------------------------------------------------------------------

    @property
    def money(self) -> Money:
        return Money(amount=self.price, currency=self.currency)

    @property
    def has_available_capacity(self) -> bool:
        return self.current_participants < self.max_participants

    @property
    def remaining_capacity(self) -> int:
        return self.max_participants - self.current_participants

    @property
    def is_at_full_capacity(self) -> bool:
        return self.current_participants >= self.max_participants

    def book_participant(self, modified_by: Optional[str] = None) -> None:
        if self.is_booked:
            raise InvalidOperationError("Slot is already booked.")
        if self.is_at_full_capacity:
            raise InvalidOperationError("Slot is at maximum capacity.")
        self.is_booked = True
        self.current_participants += 1
        self.touch(modified_by)
        self.raise_event(EventType.SLOT_BOOKED, course_id=str(self.course_id), instructor_id=str(self.instructor_id))

    def release_booking(self, modified_by: Optional[str] = None) -> None:
        if not self.is_booked:
            raise InvalidOperationError("Slot is not booked.")
        if self.current_participants <= 0:
            raise InvalidOperationError("No participants to remove.")
        self.is_booked = False
        self.current_participants -= 1
        self.touch(modified_by)
        self.raise_event(EventType.SLOT_RELEASED, course_id=str(self.course_id), instructor_id=str(self.instructor_id))

    def add_participant(self, modified_by: Optional[str] = None) -> None:
        if self.is_at_full_capacity:
            raise InvalidOperationError("Slot is at maximum capacity.")
        self.current_participants += 1
        self.touch(modified_by)

    def remove_participant(self, modified_by: Optional[str] = None) -> None:
        if self.current_participants <= 0:
            raise InvalidOperationError("No participants to remove.")
        self.current_participants -= 1
        self.touch(modified_by)

    def reserve(self, modified_by: Optional[str] = None) -> None:
        """Take one seat: the first one books the slot, later ones join it."""
        if self.is_booked:
            self.add_participant(modified_by)
        else:
            self.book_participant(modified_by)

    def unreserve(self, modified_by: Optional[str] = None) -> None:
        """Give one seat back; the last one releases the slot."""
        if self.is_booked and self.current_participants <= 1:
            self.release_booking(modified_by)
        else:
            self.remove_participant(modified_by)

    # ------------------------------------------------------------------
    # Details
    # ------------------------------------------------------------------

    def update_price(self, new_price: Decimal, modified_by: Optional[str] = None) -> None:
        if new_price is None or new_price < 0:
            raise DomainValidationError("Price cannot be negative.")
        self.price = Decimal(str(new_price))
        self.touch(modified_by)

    def set_recurring(self, pattern: str, modified_by: Optional[str] = None) -> None:
        if not pattern or not pattern.strip():
            raise DomainValidationError("Recurring pattern cannot be empty.")
        self.is_recurring = True
        self.recurring_pattern = pattern.strip()
        self.touch(modified_by)

    def cancel_recurring(self, modified_by: Optional[str] = None) -> None:
        self.is_recurring = False
        self.recurring_pattern = None
        self.touch(modified_by)

    def update_notes(self, notes: Optional[str], modified_by: Optional[str] = None) -> None:
        self.notes = notes
        self.touch(modified_by)

    def update_time(self, start_time_utc: datetime, end_time_utc: datetime, modified_by: Optional[str] = None) -> None:
        start_time_utc = ensure_utc(start_time_utc)
        end_time_utc = ensure_utc(end_time_utc)
        if end_time_utc <= start_time_utc:
            raise DomainValidationError("End time must be after start time.")
        self.start_time_utc = start_time_utc
        self.end_time_utc = end_time_utc
        self.touch(modified_by)
