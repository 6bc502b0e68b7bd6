# medicaledu/core/application/features/bookings/requests.py
from __future__ import annotations

from datetime import timedelta
from typing import ClassVar, List, Optional
from uuid import UUID

from medicaledu.core.application.caching import CachePrefixes, cache_invalidation
from medicaledu.core.application.features.availability_slots.requests import SLOT_LISTINGS
from medicaledu.core.application.features.bookings.models import BookingCancellationResponse, BookingResponse
from medicaledu.core.application.features.promo_codes.requests import PROMO_CODE_LISTINGS
from medicaledu.core.application.requests import CacheableRequest, Command, Request
from medicaledu.core.application.result import Result
from medicaledu.core.domain.enums import BookingStatus

BOOKING_LISTINGS = (
    CachePrefixes.GET_BOOKINGS,
    CachePrefixes.GET_BOOKINGS_BY_USER,
    CachePrefixes.GET_BOOKINGS_BY_INSTRUCTOR,
)
NOTIFICATION_LISTINGS = (CachePrefixes.GET_NOTIFICATIONS, CachePrefixes.GET_NOTIFICATIONS_BY_USER)


@cache_invalidation(BOOKING_LISTINGS, reason="New booking appears in booking listings")
@cache_invalidation(SLOT_LISTINGS, reason="Slot capacity changes")
@cache_invalidation(PROMO_CODE_LISTINGS, reason="Promo code redemption")
class CreateBookingCommand(Command):
    response_type: ClassVar = Result[BookingResponse]

    student_id: UUID
    availability_slot_id: UUID
    notes: Optional[str] = None
    promo_code: Optional[str] = None


@cache_invalidation(BOOKING_LISTINGS, reason="Booking status changes")
@cache_invalidation(NOTIFICATION_LISTINGS, reason="Confirmation notification")
class ConfirmBookingCommand(Command):
    response_type: ClassVar = Result[BookingResponse]

    booking_id: UUID
    meeting_url: Optional[str] = None


@cache_invalidation(BOOKING_LISTINGS, reason="Booking status changes")
@cache_invalidation(SLOT_LISTINGS, reason="Cancelled booking frees a seat")
@cache_invalidation(NOTIFICATION_LISTINGS, reason="Cancellation notification")
class CancelBookingCommand(Command):
    response_type: ClassVar = Result[BookingCancellationResponse]

    booking_id: UUID
    reason: str = ""


@cache_invalidation(BOOKING_LISTINGS, reason="Booking status changes")
@cache_invalidation(SLOT_LISTINGS, reason="Slot listings show booking state")
class CompleteBookingCommand(Command):
    response_type: ClassVar = Result[BookingResponse]

    booking_id: UUID


@cache_invalidation(BOOKING_LISTINGS, reason="Booking status changes")
@cache_invalidation(SLOT_LISTINGS, reason="Slot listings show booking state")
class MarkBookingNoShowCommand(Command):
    response_type: ClassVar = Result[BookingResponse]

    booking_id: UUID


@cache_invalidation(BOOKING_LISTINGS, reason="Booking moves to another slot")
@cache_invalidation(SLOT_LISTINGS, reason="Seats move between slots")
@cache_invalidation(NOTIFICATION_LISTINGS, reason="Reschedule notification")
class RescheduleBookingCommand(Command):
    response_type: ClassVar = Result[BookingResponse]

    booking_id: UUID
    new_slot_id: UUID


@cache_invalidation(BOOKING_LISTINGS, reason="Booking notes changed")
@cache_invalidation(SLOT_LISTINGS, reason="Slot listings show booking state")
class UpdateBookingNotesCommand(Command):
    response_type: ClassVar = Result[BookingResponse]

    booking_id: UUID
    student_notes: Optional[str] = None
    instructor_notes: Optional[str] = None
    meeting_url: Optional[str] = None


class GetBookingByIdQuery(Request):
    response_type: ClassVar = Optional[BookingResponse]

    booking_id: UUID


class GetBookingsQuery(CacheableRequest):
    response_type: ClassVar = List[BookingResponse]
    cache_duration: ClassVar[timedelta] = timedelta(minutes=5)
    cache_prefix: ClassVar[str] = CachePrefixes.GET_BOOKINGS

    status: Optional[BookingStatus] = None
    student_id: Optional[UUID] = None
    instructor_id: Optional[UUID] = None
    page: int = 0
    page_size: int = 50

    def get_cache_key(self) -> str:
        if self.student_id is not None:
            return self.hashed_key(CachePrefixes.GET_BOOKINGS_BY_USER)
        if self.instructor_id is not None:
            return self.hashed_key(CachePrefixes.GET_BOOKINGS_BY_INSTRUCTOR)
        return self.hashed_key(CachePrefixes.GET_BOOKINGS)
