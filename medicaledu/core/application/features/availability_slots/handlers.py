# medicaledu/core/application/features/availability_slots/handlers.py
from __future__ import annotations

from typing import List, Optional

import structlog

from medicaledu.core.application.features.availability_slots.models import AvailabilitySlotResponse
from medicaledu.core.application.features.availability_slots.requests import (
    CreateAvailabilitySlotCommand,
    DeleteAvailabilitySlotCommand,
    GetAvailabilitySlotByIdQuery,
    GetAvailabilitySlotsQuery,
    GetAvailableSlotsQuery,
    SetSlotRecurrenceCommand,
    UpdateAvailabilitySlotCommand,
)
from medicaledu.core.application.mediator import Handler, handles
from medicaledu.core.domain.entities import AvailabilitySlot, utcnow
from medicaledu.core.domain.entities.base import ensure_utc
from medicaledu.core.domain.exceptions import EntityNotFoundError, InvalidOperationError

logger = structlog.get_logger()


class SlotHandler(Handler):
    def _get_slot(self, slot_id) -> AvailabilitySlot:
        slot = self.uow.availability_slots.get_by_id(slot_id)
        if slot is None:
            raise EntityNotFoundError("Availability slot", slot_id)
        return slot


@handles(CreateAvailabilitySlotCommand)
class CreateAvailabilitySlotHandler(SlotHandler):
    def handle(self, request: CreateAvailabilitySlotCommand) -> AvailabilitySlotResponse:
        instructor = self.uow.users.get_by_id(request.instructor_id)
        if instructor is None:
            raise EntityNotFoundError("Instructor", request.instructor_id)
        course = self.uow.courses.get_by_id(request.course_id)
        if course is None:
            raise EntityNotFoundError("Course", request.course_id)

        slot = AvailabilitySlot.create(
            course_id=course.id,
            instructor_id=instructor.id,
            start_time_utc=request.start_time_utc,
            end_time_utc=request.end_time_utc,
            price=request.price if request.price is not None else course.price,
            currency=request.currency or course.currency,
            max_participants=request.max_participants,
            notes=request.notes,
            created_by=str(instructor.id),
        )
        if request.recurring_pattern:
            slot.set_recurring(request.recurring_pattern)

        course.add_availability_slot(slot)
        self.uow.availability_slots.add(slot)
        logger.info("slot_created", slot_id=str(slot.id), course_id=str(course.id))
        return AvailabilitySlotResponse.from_entity(slot)


@handles(UpdateAvailabilitySlotCommand)
class UpdateAvailabilitySlotHandler(SlotHandler):
    def handle(self, request: UpdateAvailabilitySlotCommand) -> AvailabilitySlotResponse:
        slot = self._get_slot(request.slot_id)

        if request.start_time_utc is not None and request.end_time_utc is not None:
            moved = (
                ensure_utc(request.start_time_utc) != slot.start_time_utc
                or ensure_utc(request.end_time_utc) != slot.end_time_utc
            )
            if moved and slot.current_participants > 0:
                raise InvalidOperationError("Cannot move a slot that already has participants.")
            slot.update_time(request.start_time_utc, request.end_time_utc)
        if request.price is not None:
            slot.update_price(request.price)
        if request.notes is not None:
            slot.update_notes(request.notes or None)
        return AvailabilitySlotResponse.from_entity(slot)


@handles(SetSlotRecurrenceCommand)
class SetSlotRecurrenceHandler(SlotHandler):
    def handle(self, request: SetSlotRecurrenceCommand) -> AvailabilitySlotResponse:
        slot = self._get_slot(request.slot_id)
        if request.pattern and request.pattern.strip():
            slot.set_recurring(request.pattern)
        else:
            slot.cancel_recurring()
        return AvailabilitySlotResponse.from_entity(slot)


@handles(DeleteAvailabilitySlotCommand)
class DeleteAvailabilitySlotHandler(SlotHandler):
    def handle(self, request: DeleteAvailabilitySlotCommand) -> bool:
        slot = self._get_slot(request.slot_id)
        # Cancelled bookings still reference the slot.
        if slot.bookings:
            raise InvalidOperationError("Cannot remove availability slot with bookings")
        course = slot.course
        course.remove_availability_slot(slot.id)
        self.uow.availability_slots.delete(slot)
        logger.info("slot_deleted", slot_id=str(slot.id), course_id=str(course.id))
        return True


@handles(GetAvailabilitySlotByIdQuery)
class GetAvailabilitySlotByIdHandler(Handler):
    def handle(self, request: GetAvailabilitySlotByIdQuery) -> Optional[AvailabilitySlotResponse]:
        slot = self.uow.availability_slots.get_by_id(request.slot_id)
        return AvailabilitySlotResponse.from_entity(slot) if slot is not None else None


@handles(GetAvailabilitySlotsQuery)
class GetAvailabilitySlotsHandler(Handler):
    def handle(self, request: GetAvailabilitySlotsQuery) -> List[AvailabilitySlotResponse]:
        slots = self.uow.availability_slots.list_slots(
            instructor_id=request.instructor_id,
            course_id=request.course_id,
            is_available=request.is_available,
            start=ensure_utc(request.start) if request.start else None,
            end=ensure_utc(request.end) if request.end else None,
        )
        return [AvailabilitySlotResponse.from_entity(slot) for slot in slots]


@handles(GetAvailableSlotsQuery)
class GetAvailableSlotsHandler(Handler):
    def handle(self, request: GetAvailableSlotsQuery) -> List[AvailabilitySlotResponse]:
        slots = self.uow.availability_slots.list_available(
            start=ensure_utc(request.start),
            end=ensure_utc(request.end),
            now=utcnow(),
            instructor_id=request.instructor_id,
        )
        return [AvailabilitySlotResponse.from_entity(slot) for slot in slots]
