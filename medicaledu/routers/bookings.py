# medicaledu/routers/bookings.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from medicaledu.core.application.features.bookings.models import BookingCancellationResponse, BookingResponse
from medicaledu.core.application.features.bookings.requests import (
    CancelBookingCommand,
    CompleteBookingCommand,
    ConfirmBookingCommand,
    CreateBookingCommand,
    GetBookingByIdQuery,
    GetBookingsQuery,
    MarkBookingNoShowCommand,
    RescheduleBookingCommand,
    UpdateBookingNotesCommand,
)
from medicaledu.core.application.mediator import Mediator
from medicaledu.routers.dependencies import found, get_mediator, query_from_params, unwrap
from medicaledu.schemas.bookings import (
    BookingNotesBody,
    CancelBookingBody,
    ConfirmBookingBody,
    RescheduleBookingBody,
)

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Book a seat on a slot")
async def create_booking(command: CreateBookingCommand, mediator: Mediator = Depends(get_mediator)) -> BookingResponse:
    return unwrap(await mediator.send(command))


@router.get("", summary="List bookings", description="Filter with `status`, `studentId`, `instructorId`.")
async def list_bookings(request: Request, mediator: Mediator = Depends(get_mediator)) -> List[BookingResponse]:
    return await mediator.send(query_from_params(GetBookingsQuery, request))


@router.get("/{booking_id}", summary="Get a booking")
async def get_booking(booking_id: UUID, mediator: Mediator = Depends(get_mediator)) -> BookingResponse:
    return found(await mediator.send(GetBookingByIdQuery(booking_id=booking_id)), "Booking", booking_id)


@router.post("/{booking_id}/confirm", summary="Confirm a pending booking")
async def confirm_booking(
    booking_id: UUID, payload: ConfirmBookingBody, mediator: Mediator = Depends(get_mediator)
) -> BookingResponse:
    return unwrap(await mediator.send(ConfirmBookingCommand(booking_id=booking_id, meeting_url=payload.meeting_url)))


@router.post("/{booking_id}/cancel", summary="Cancel a booking and compute the refund")
async def cancel_booking(
    booking_id: UUID, payload: CancelBookingBody, mediator: Mediator = Depends(get_mediator)
) -> BookingCancellationResponse:
    return unwrap(await mediator.send(CancelBookingCommand(booking_id=booking_id, reason=payload.reason)))


@router.post("/{booking_id}/complete", summary="Mark a session as held")
async def complete_booking(booking_id: UUID, mediator: Mediator = Depends(get_mediator)) -> BookingResponse:
    return unwrap(await mediator.send(CompleteBookingCommand(booking_id=booking_id)))


@router.post("/{booking_id}/no-show", summary="Mark a student as absent")
async def mark_no_show(booking_id: UUID, mediator: Mediator = Depends(get_mediator)) -> BookingResponse:
    return unwrap(await mediator.send(MarkBookingNoShowCommand(booking_id=booking_id)))


@router.post("/{booking_id}/reschedule", summary="Move a booking to another slot")
async def reschedule_booking(
    booking_id: UUID, payload: RescheduleBookingBody, mediator: Mediator = Depends(get_mediator)
) -> BookingResponse:
    return unwrap(
        await mediator.send(RescheduleBookingCommand(booking_id=booking_id, new_slot_id=payload.new_slot_id))
    )


@router.put("/{booking_id}/notes", summary="Update notes and meeting link")
async def update_notes(
    booking_id: UUID, payload: BookingNotesBody, mediator: Mediator = Depends(get_mediator)
) -> BookingResponse:
    return unwrap(await mediator.send(UpdateBookingNotesCommand(booking_id=booking_id, **payload.model_dump())))
