# medicaledu/core/application/features/availability_slots/validators.py
from decimal import Decimal
from typing import Iterable, Optional

from pydantic import Field

from medicaledu.core.application.features.availability_slots.requests import (
    CreateAvailabilitySlotCommand,
    GetAvailabilitySlotsQuery,
    GetAvailableSlotsQuery,
    SetSlotRecurrenceCommand,
    UpdateAvailabilitySlotCommand,
)
from medicaledu.core.application.validation import RequestRules, validates
from medicaledu.core.domain.entities.base import ensure_utc


@validates(CreateAvailabilitySlotCommand)
class CreateSlotRules(RequestRules):
    price: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    max_participants: int = Field(..., ge=1, le=1000)
    notes: Optional[str] = Field(None, max_length=1000)
    recurring_pattern: Optional[str] = Field(None, max_length=200)


@validates(CreateAvailabilitySlotCommand)
def validate_create_slot(request: CreateAvailabilitySlotCommand) -> Iterable[str]:
    if ensure_utc(request.end_time_utc) <= ensure_utc(request.start_time_utc):
        yield "End time must be after start time."


@validates(UpdateAvailabilitySlotCommand)
class UpdateSlotRules(RequestRules):
    price: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=1000)


@validates(UpdateAvailabilitySlotCommand)
def validate_update_slot(request: UpdateAvailabilitySlotCommand) -> Iterable[str]:
    if (request.start_time_utc is None) != (request.end_time_utc is None):
        yield "Start and end time must be changed together."
    elif request.start_time_utc is not None and ensure_utc(request.end_time_utc) <= ensure_utc(request.start_time_utc):
        yield "End time must be after start time."


@validates(SetSlotRecurrenceCommand)
class SetRecurrenceRules(RequestRules):
    pattern: Optional[str] = Field(None, max_length=200)


@validates(GetAvailabilitySlotsQuery)
def validate_get_slots(request: GetAvailabilitySlotsQuery) -> Iterable[str]:
    if request.start is not None and request.end is not None and ensure_utc(request.end) < ensure_utc(request.start):
        yield "End of the range must not be before its start."


@validates(GetAvailableSlotsQuery)
def validate_get_available_slots(request: GetAvailableSlotsQuery) -> Iterable[str]:
    if ensure_utc(request.end) <= ensure_utc(request.start):
        yield "End of the range must be after its start."
