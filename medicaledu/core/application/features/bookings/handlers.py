# medicaledu/core/application/features/bookings/handlers.py
from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

import structlog

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
from medicaledu.core.application.mediator import Handler, handles
from medicaledu.core.application.result import Result
from medicaledu.core.domain.entities import Booking, Notification
from medicaledu.core.domain.entities.base import utcnow
from medicaledu.core.domain.enums import NotificationType

logger = structlog.get_logger()


def _booking_not_found(booking_id) -> Result:
    return Result.not_found(f"Booking with ID {booking_id} not found.")


class BookingHandler(Handler):
    def _notify(self, booking: Booking, type_: NotificationType, title: str, message: str) -> None:
        self.uow.notifications.add(
            Notification.create(
                user_id=booking.student_id,
                type=type_,
                title=title,
                message=message,
                related_entity_id=booking.id,
                related_entity_type="Booking",
            )
        )


@handles(CreateBookingCommand)
class CreateBookingHandler(BookingHandler):
    def handle(self, request: CreateBookingCommand) -> Result[BookingResponse]:
        student = self.uow.users.get_by_id(request.student_id)
        if student is None:
            return Result.not_found(f"User with ID {request.student_id} not found.")
        if not student.is_active:
            return Result.failure("Inactive users cannot create bookings.")

        slot = self.uow.availability_slots.get_by_id(request.availability_slot_id)
        if slot is None:
            return Result.not_found(f"Availability slot with ID {request.availability_slot_id} not found.")
        if slot.start_time_utc <= utcnow():
            return Result.failure("Cannot book a slot that has already started.")
        if not slot.has_available_capacity:
            return Result.failure("Slot is at maximum capacity.")
        if self.uow.bookings.has_active_booking(student_id=student.id, slot_id=slot.id):
            return Result.conflict("Student already has an active booking for this slot.")

        amount = slot.money
        discount = Decimal("0")
        promo_code_id = None
        if request.promo_code:
            promo = self.uow.promo_codes.get_by_code(request.promo_code)
            if promo is None:
                return Result.not_found(f"Promo code {request.promo_code.strip().upper()} not found.")
            if not promo.is_valid_at():
                return Result.failure("Promo code is not valid.")
            if not promo.applies_to(slot.course_id):
                return Result.failure("Promo code does not apply to this course.")
            reduction = promo.discount_for(amount)
            promo.redeem()
            amount = amount.subtract(reduction)
            discount = reduction.amount
            promo_code_id = promo.id

        booking = Booking.create(
            student_id=student.id,
            availability_slot_id=slot.id,
            amount=amount,
            notes=request.notes,
            discount_amount=discount,
            promo_code_id=promo_code_id,
        )
        slot.reserve()
        booking.slot = slot
        self.uow.bookings.add(booking)

        logger.info("booking_created", booking_id=str(booking.id), slot_id=str(slot.id), amount=str(amount))
        return Result.success(BookingResponse.from_entity(booking))


@handles(ConfirmBookingCommand)
class ConfirmBookingHandler(BookingHandler):
    def handle(self, request: ConfirmBookingCommand) -> Result[BookingResponse]:
        booking = self.uow.bookings.get_by_id(request.booking_id)
        if booking is None:
            return _booking_not_found(request.booking_id)
        booking.confirm()
        if request.meeting_url:
            booking.set_meeting_url(request.meeting_url)
        self._notify(
            booking,
            NotificationType.BOOKING_CONFIRMATION,
            "Booking confirmed",
            f"Your session on {booking.slot.start_time_utc:%Y-%m-%d %H:%M} UTC is confirmed.",
        )
        return Result.success(BookingResponse.from_entity(booking))


@handles(CancelBookingCommand)
class CancelBookingHandler(BookingHandler):
    def handle(self, request: CancelBookingCommand) -> Result[BookingCancellationResponse]:
        booking = self.uow.bookings.get_by_id(request.booking_id)
        if booking is None:
            return _booking_not_found(request.booking_id)

        booking.cancel(request.reason)
        booking.slot.unreserve()
        refund = booking.refund_amount()
        self._notify(
            booking,
            NotificationType.BOOKING_CANCELLATION,
            "Booking cancelled",
            f"Your booking was cancelled. Refund due: {refund}.",
        )

        logger.info("booking_cancelled", booking_id=str(booking.id), refund=str(refund))
        return Result.success(
            BookingCancellationResponse(
                booking=BookingResponse.from_entity(booking),
                refund_amount=float(refund.amount),
                refund_currency=refund.currency,
                within_cancellation_window=booking.is_within_cancellation_window(booking.cancelled_at),
            )
        )


@handles(CompleteBookingCommand)
class CompleteBookingHandler(BookingHandler):
    def handle(self, request: CompleteBookingCommand) -> Result[BookingResponse]:
        booking = self.uow.bookings.get_by_id(request.booking_id)
        if booking is None:
            return _booking_not_found(request.booking_id)
        booking.complete()
        return Result.success(BookingResponse.from_entity(booking))


@handles(MarkBookingNoShowCommand)
class MarkBookingNoShowHandler(BookingHandler):
    def handle(self, request: MarkBookingNoShowCommand) -> Result[BookingResponse]:
        booking = self.uow.bookings.get_by_id(request.booking_id)
        if booking is None:
            return _booking_not_found(request.booking_id)
        booking.mark_no_show()
        return Result.success(BookingResponse.from_entity(booking))


@handles(RescheduleBookingCommand)
class RescheduleBookingHandler(BookingHandler):
    def handle(self, request: RescheduleBookingCommand) -> Result[BookingResponse]:
        booking = self.uow.bookings.get_by_id(request.booking_id)
        if booking is None:
            return _booking_not_found(request.booking_id)

        new_slot = self.uow.availability_slots.get_by_id(request.new_slot_id)
        if new_slot is None:
            return Result.not_found(f"Availability slot with ID {request.new_slot_id} not found.")
        if new_slot.course_id != booking.slot.course_id:
            return Result.failure("Bookings can only be moved to a slot of the same course.")
        if new_slot.start_time_utc <= utcnow():
            return Result.failure("Cannot move a booking to a slot that has already started.")
        if not new_slot.has_available_capacity:
            return Result.failure("Slot is at maximum capacity.")

        old_slot = booking.slot
        booking.reschedule(new_slot.id)
        old_slot.unreserve()
        new_slot.reserve()
        booking.slot = new_slot
        self._notify(
            booking,
            NotificationType.BOOKING_RESCHEDULED,
            "Booking rescheduled",
            f"Your session moved to {new_slot.start_time_utc:%Y-%m-%d %H:%M} UTC.",
        )
        return Result.success(BookingResponse.from_entity(booking))


@handles(UpdateBookingNotesCommand)
class UpdateBookingNotesHandler(BookingHandler):
    def handle(self, request: UpdateBookingNotesCommand) -> Result[BookingResponse]:
        booking = self.uow.bookings.get_by_id(request.booking_id)
        if booking is None:
            return _booking_not_found(request.booking_id)
        if request.student_notes is not None:
            booking.set_student_notes(request.student_notes)
        if request.instructor_notes is not None:
            booking.set_instructor_notes(request.instructor_notes)
        if request.meeting_url is not None:
            booking.set_meeting_url(request.meeting_url or None)
        return Result.success(BookingResponse.from_entity(booking))


@handles(GetBookingByIdQuery)
class GetBookingByIdHandler(Handler):
    def handle(self, request: GetBookingByIdQuery) -> Optional[BookingResponse]:
        booking = self.uow.bookings.get_by_id(request.booking_id)
        return BookingResponse.from_entity(booking) if booking is not None else None


@handles(GetBookingsQuery)
class GetBookingsHandler(Handler):
    def handle(self, request: GetBookingsQuery) -> List[BookingResponse]:
        bookings = self.uow.bookings.list_bookings(
            status=request.status,
            student_id=request.student_id,
            instructor_id=request.instructor_id,
            limit=request.page_size,
            offset=request.page * request.page_size,
        )
        return [BookingResponse.from_entity(booking) for booking in bookings]
