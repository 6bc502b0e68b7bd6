# medicaledu/schemas/bookings.py
from typing import Optional
from uuid import UUID

from medicaledu.schemas.base import RequestBody


class ConfirmBookingBody(RequestBody):
    meeting_url: Optional[str] = None


class CancelBookingBody(RequestBody):
    reason: str = ""


class RescheduleBookingBody(RequestBody):
    new_slot_id: UUID


class BookingNotesBody(RequestBody):
    student_notes: Optional[str] = None
    instructor_notes: Optional[str] = None
    meeting_url: Optional[str] = None
