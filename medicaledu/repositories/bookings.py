# medicaledu/repositories/bookings.py

from __future__ import annotations

from typing import Any, Optional, Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, joinedload

from medicaledu.core.domain.entities import AvailabilitySlot, Booking
from medicaledu.core.domain.entities.booking import CANCELLABLE_STATUSES
from medicaledu.core.domain.enums import BookingStatus


class BookingsRepository:
    """
    Thin data-access layer around the Booking aggregate.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    def _base_select(self) -> Select[Any]:
        return select(Booking).options(joinedload(Booking.slot))

    def get_by_id(self, booking_id: UUID) -> Optional[Booking]:
        stmt = self._base_select().where(Booking.id == booking_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_bookings(
        self,
        *,
        status: Optional[BookingStatus] = None,
        student_id: Optional[UUID] = None,
        instructor_id: Optional[UUID] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Booking]:
        stmt = self._base_select()
        if status is not None:
            stmt = stmt.where(Booking.status == status)
        if student_id is not None:
            stmt = stmt.where(Booking.student_id == student_id)
        if instructor_id is not None:
            stmt = stmt.join(AvailabilitySlot, Booking.availability_slot_id == AvailabilitySlot.id).where(
                AvailabilitySlot.instructor_id == instructor_id
            )

        stmt = stmt.order_by(Booking.created_at.desc())
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).unique().scalars().all())

    def has_active_booking(self, *, student_id: UUID, slot_id: UUID) -> bool:
        stmt = select(Booking.id).where(
            Booking.student_id == student_id,
            Booking.availability_slot_id == slot_id,
            Booking.status.in_(CANCELLABLE_STATUSES),
        )
        return self.session.execute(stmt).first() is not None

    def add(self, booking: Booking) -> Booking:
        self.session.add(booking)
        return booking
