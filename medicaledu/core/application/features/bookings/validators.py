# medicaledu/core/application/features/bookings/validators.py
from typing import Optional

from pydantic import Field, field_validator

from medicaledu.core.application.features.bookings.requests import (
    CancelBookingCommand,
    ConfirmBookingCommand,
    CreateBookingCommand,
    GetBookingsQuery,
    UpdateBookingNotesCommand,
)
from medicaledu.core.application.validation import PageRules, RequestRules, url_or_none, validates


@validates(CreateBookingCommand)
class CreateBookingRules(RequestRules):
    notes: Optional[str] = Field(None, max_length=1000)
    promo_code: Optional[str] = Field(None, min_length=1, max_length=20)


@validates(ConfirmBookingCommand)
class ConfirmBookingRules(RequestRules):
    meeting_url: Optional[str] = None

    @field_validator("meeting_url")
    @classmethod
    def check_url(cls, value):
        return url_or_none(value)


@validates(CancelBookingCommand)
class CancelBookingRules(RequestRules):
    reason: str = Field(..., min_length=1, max_length=500)


@validates(UpdateBookingNotesCommand)
class UpdateBookingNotesRules(RequestRules):
    student_notes: Optional[str] = Field(None, max_length=1000)
    instructor_notes: Optional[str] = Field(None, max_length=1000)
    meeting_url: Optional[str] = None

    @field_validator("meeting_url")
    @classmethod
    def check_url(cls, value):
        return url_or_none(value)


@validates(GetBookingsQuery)
class GetBookingsRules(PageRules):
    pass
