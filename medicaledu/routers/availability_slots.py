# medicaledu/routers/availability_slots.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status

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
from medicaledu.core.application.mediator import Mediator
from medicaledu.routers.dependencies import found, get_mediator, query_from_params
from medicaledu.schemas.availability_slots import SlotRecurrenceBody, SlotUpdateBody

router = APIRouter(prefix="/availability-slots", tags=["availability-slots"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Offer a session slot")
async def create_slot(
    command: CreateAvailabilitySlotCommand, mediator: Mediator = Depends(get_mediator)
) -> AvailabilitySlotResponse:
    return await mediator.send(command)


@router.get("", summary="List slots", description="Filter with `instructorId`, `courseId`, `isAvailable`, `start`, `end`.")
async def list_slots(request: Request, mediator: Mediator = Depends(get_mediator)) -> List[AvailabilitySlotResponse]:
    return await mediator.send(query_from_params(GetAvailabilitySlotsQuery, request))


@router.get("/available", summary="Bookable slots in a time window")
async def list_available_slots(
    request: Request, mediator: Mediator = Depends(get_mediator)
) -> List[AvailabilitySlotResponse]:
    return await mediator.send(query_from_params(GetAvailableSlotsQuery, request))


@router.get("/{slot_id}", summary="Get a slot")
async def get_slot(slot_id: UUID, mediator: Mediator = Depends(get_mediator)) -> AvailabilitySlotResponse:
    return found(await mediator.send(GetAvailabilitySlotByIdQuery(slot_id=slot_id)), "AvailabilitySlot", slot_id)


@router.put("/{slot_id}", summary="Update a slot")
async def update_slot(
    slot_id: UUID, payload: SlotUpdateBody, mediator: Mediator = Depends(get_mediator)
) -> AvailabilitySlotResponse:
    return await mediator.send(UpdateAvailabilitySlotCommand(slot_id=slot_id, **payload.model_dump()))


@router.put("/{slot_id}/recurrence", summary="Set or cancel a slot's recurrence")
async def set_recurrence(
    slot_id: UUID, payload: SlotRecurrenceBody, mediator: Mediator = Depends(get_mediator)
) -> AvailabilitySlotResponse:
    return await mediator.send(SetSlotRecurrenceCommand(slot_id=slot_id, pattern=payload.pattern))


@router.delete("/{slot_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an unbooked slot")
async def delete_slot(slot_id: UUID, mediator: Mediator = Depends(get_mediator)) -> Response:
    await mediator.send(DeleteAvailabilitySlotCommand(slot_id=slot_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
