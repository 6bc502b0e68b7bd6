# medicaledu/core/application/features/bookings/models.py
from datetime import datetime
from typing import Optional
from uuid import UUID

from medicaledu.core.application.dto import ResponseModel, as_float
from medicaledu.core.domain.entities import Booking


class BookingResponse(ResponseModel):
    id: UUID
    student_id: UUID
    availability_slot_id: UUID
    course_id: Optional[UUID] = None
    instructor_id: Optional[UUID] = None
    status: str
    amount: float
    discount_amount: float
    currency: str
    promo_code_id: Optional[UUID] = None
    student_notes: Optional[str] = None
    instructor_notes: Optional[str] = None
    meeting_url: Optional[str] = None
    session_start_utc: Optional[datetime] = None
    session_end_utc: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    rescheduled_from_slot_id: Optional[UUID] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, booking: Booking) -> "BookingResponse":
        slot = booking.slot
        return cls(
            id=booking.id,
            student_id=booking.student_id,
            availability_slot_id=booking.availability_slot_id,
            course_id=slot.course_id if slot is not None else None,
            instructor_id=slot.instructor_id if slot is not None else None,
            status=booking.status.value,
            amount=as_float(booking.amount),
            discount_amount=as_float(booking.discount_amount) or 0.0,
            currency=booking.currency,
            promo_code_id=booking.promo_code_id,
            student_notes=booking.student_notes,
            instructor_notes=booking.instructor_notes,
            meeting_url=booking.meeting_url,
            session_start_utc=slot.start_time_utc if slot is not None else None,
            session_end_utc=slot.end_time_utc if slot is not None else None,
            confirmed_at=booking.confirmed_at,
            cancelled_at=booking.cancelled_at,
            cancellation_reason=booking.cancellation_reason,
            rescheduled_from_slot_id=booking.rescheduled_from_slot_id,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )


class BookingCancellationResponse(ResponseModel):
    booking: BookingResponse
    refund_amount: float
    refund_currency: str
    within_cancellation_window: bool
