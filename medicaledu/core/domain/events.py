# medicaledu/core/domain/events.py
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict
from typing import Dict, Any
from datetime import datetime, timezone
import uuid


class EventType(str, Enum):
    """
    Registry of all domain events raised by aggregates.
    """
    # Users
    USER_CREATED = "user.created"
    USER_EMAIL_CONFIRMED = "user.email_confirmed"
    USER_PASSWORD_CHANGED = "user.password_changed"
    USER_LOCKED = "user.locked"

    # Courses
    COURSE_CREATED = "course.created"
    COURSE_UPDATED = "course.updated"
    COURSE_PUBLISHED = "course.published"
    COURSE_UNPUBLISHED = "course.unpublished"
    COURSE_DEACTIVATED = "course.deactivated"
    COURSE_MATERIAL_ADDED = "course.material_added"
    COURSE_MATERIAL_REMOVED = "course.material_removed"
    COURSE_MATERIALS_REORDERED = "course.materials_reordered"
    COURSE_SLOT_ADDED = "course.slot_added"
    COURSE_SLOT_REMOVED = "course.slot_removed"

    # Availability slots
    SLOT_CREATED = "slot.created"
    SLOT_BOOKED = "slot.booked"
    SLOT_RELEASED = "slot.released"

    # Bookings
    BOOKING_CREATED = "booking.created"
    BOOKING_CONFIRMED = "booking.confirmed"
    BOOKING_CANCELLED = "booking.cancelled"
    BOOKING_COMPLETED = "booking.completed"
    BOOKING_NO_SHOW = "booking.no_show"
    BOOKING_RESCHEDULED = "booking.rescheduled"

    # Payments
    PAYMENT_SUCCEEDED = "payment.succeeded"
    PAYMENT_FAILED = "payment.failed"
    PAYMENT_REFUNDED = "payment.refunded"


class DomainEvent(BaseModel):
    """
    Envelope for something that happened inside an aggregate.

    Attributes:
        id: Unique UUID of the occurrence.
        type: The classification of the event.
        aggregate_id: Identifier of the aggregate that raised it.
        payload: Event data (e.g. {'reason': 'Schedule conflict'}).
        occurred_at: When the event occurred (UTC).
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: EventType
    aggregate_id: str
    payload: Dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(use_enum_values=True, frozen=True)
