# medicaledu/core/application/features/availability_slots/models.py
from datetime import datetime
from typing import Optional
from uuid import UUID

from medicaledu.core.application.dto import ResponseModel, as_float
from medicaledu.core.domain.entities import AvailabilitySlot


class AvailabilitySlotResponse(ResponseModel):
    id: UUID
    course_id: UUID
    instructor_id: UUID
    start_time_utc: datetime
    end_time_utc: datetime
    price: float
    currency: str
    max_participants: int
    current_participants: int
    remaining_capacity: int
    is_booked: bool
    notes: Optional[str] = None
    is_recurring: bool
    recurring_pattern: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, slot: AvailabilitySlot) -> "AvailabilitySlotResponse":
        return cls(
            id=slot.id,
            course_id=slot.course_id,
            instructor_id=slot.instructor_id,
            start_time_utc=slot.start_time_utc,
            end_time_utc=slot.end_time_utc,
            price=as_float(slot.price),
            currency=slot.currency,
            max_participants=slot.max_participants,
            current_participants=slot.current_participants,
            remaining_capacity=slot.remaining_capacity,
            is_booked=slot.is_booked,
            notes=slot.notes,
            is_recurring=slot.is_recurring,
            recurring_pattern=slot.recurring_pattern,
            created_at=slot.created_at,
            updated_at=slot.updated_at,
        )
