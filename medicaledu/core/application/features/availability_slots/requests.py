# medicaledu/core/application/features/availability_slots/requests.py
from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import ClassVar, List, Optional
from uuid import UUID

from medicaledu.core.application.caching import CachePrefixes, cache_invalidation
from medicaledu.core.application.features.availability_slots.models import AvailabilitySlotResponse
from medicaledu.core.application.features.courses.requests import COURSE_DATA
from medicaledu.core.application.requests import CacheableRequest, Command, Request

SLOT_LISTINGS = (CachePrefixes.GET_AVAILABILITY_SLOTS, CachePrefixes.GET_AVAILABILITY_SLOTS_BY_INSTRUCTOR)


@cache_invalidation(SLOT_LISTINGS, reason="New slot appears in slot listings")
@cache_invalidation(COURSE_DATA, reason="Course slot count changes")
class CreateAvailabilitySlotCommand(Command):
    response_type: ClassVar = AvailabilitySlotResponse

    course_id: UUID
    instructor_id: UUID
    start_time_utc: datetime
    end_time_utc: datetime
    price: Optional[Decimal] = None
    currency: Optional[str] = None
    max_participants: int = 1
    notes: Optional[str] = None
    recurring_pattern: Optional[str] = None


@cache_invalidation(SLOT_LISTINGS, reason="Slot details changed")
class UpdateAvailabilitySlotCommand(Command):
    response_type: ClassVar = AvailabilitySlotResponse

    slot_id: UUID
    start_time_utc: Optional[datetime] = None
    end_time_utc: Optional[datetime] = None
    price: Optional[Decimal] = None
    notes: Optional[str] = None


@cache_invalidation(SLOT_LISTINGS, reason="Slot recurrence changed")
class SetSlotRecurrenceCommand(Command):
    """Sets the recurrence pattern; an empty pattern cancels the recurrence."""

    response_type: ClassVar = AvailabilitySlotResponse

    slot_id: UUID
    pattern: Optional[str] = None


@cache_invalidation(SLOT_LISTINGS, reason="Slot removed from slot listings")
@cache_invalidation(COURSE_DATA, reason="Course slot count changes")
class DeleteAvailabilitySlotCommand(Command):
    response_type: ClassVar = bool

    slot_id: UUID


class GetAvailabilitySlotByIdQuery(Request):
    response_type: ClassVar = Optional[AvailabilitySlotResponse]

    slot_id: UUID


class GetAvailabilitySlotsQuery(CacheableRequest):
    response_type: ClassVar = List[AvailabilitySlotResponse]
    cache_duration: ClassVar[timedelta] = timedelta(minutes=5)
    cache_prefix: ClassVar[str] = CachePrefixes.GET_AVAILABILITY_SLOTS

    instructor_id: Optional[UUID] = None
    course_id: Optional[UUID] = None
    is_available: Optional[bool] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def get_cache_key(self) -> str:
        if self.instructor_id is not None:
            return self.hashed_key(CachePrefixes.GET_AVAILABILITY_SLOTS_BY_INSTRUCTOR)
        return self.hashed_key(CachePrefixes.GET_AVAILABILITY_SLOTS)


class GetAvailableSlotsQuery(Request):
    """Bookable slots in a window: not started yet and not full."""

    response_type: ClassVar = List[AvailabilitySlotResponse]

    start: datetime
    end: datetime
    instructor_id: Optional[UUID] = None
