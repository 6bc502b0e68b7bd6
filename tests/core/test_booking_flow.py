# tests/core/test_booking_flow.py
import uuid
from datetime import timedelta
from decimal import Decimal

import pytest

from medicaledu.core.application.features.bookings.requests import (
    CancelBookingCommand,
    CompleteBookingCommand,
    ConfirmBookingCommand,
    CreateBookingCommand,
    GetBookingsQuery,
    MarkBookingNoShowCommand,
    RescheduleBookingCommand,
    UpdateBookingNotesCommand,
)
from medicaledu.core.application.features.payments.requests import (
    CancelPaymentCommand,
    CreatePaymentCommand,
    GetPaymentsByUserQuery,
    MarkPaymentFailedCommand,
    MarkPaymentSucceededCommand,
    RefundPaymentCommand,
)
from medicaledu.core.application.features.promo_codes.requests import (
    CreatePromoCodeCommand,
    GetPromoCodeQuery,
    GetPromoCodesQuery,
    SetPromoCodeActiveCommand,
)
from medicaledu.core.application.result import ErrorType
from medicaledu.core.domain.entities import Course, Notification, utcnow
from medicaledu.core.domain.enums import BookingStatus, DiscountType, NotificationType, PaymentStatus
from medicaledu.core.domain.exceptions import DomainValidationError, InvalidOperationError


async def book(mediator, student, slot, **kwargs):
    result = await mediator.send(CreateBookingCommand(student_id=student.id, availability_slot_id=slot.id, **kwargs))
    assert result.is_success, result.errors
    return result.value


async def confirmed_booking(mediator, student, slot):
    booking = await book(mediator, student, slot)
    result = await mediator.send(ConfirmBookingCommand(booking_id=booking.id))
    return result.value


def promo_command(code="SPRING20", **overrides):
    values = dict(
        code=code,
        discount_type=DiscountType.PERCENTAGE,
        discount_value=Decimal("20"),
        valid_from=utcnow() - timedelta(days=1),
        valid_until=utcnow() + timedelta(days=30),
    )
    values.update(overrides)
    return CreatePromoCodeCommand(**values)


@pytest.mark.asyncio
class TestBookings:

    async def test_create_booking_takes_a_seat(self, mediator, student, slot):
        """
        Scenario: A student books an open slot.
        Expected: A pending booking at the slot price, and one seat fewer on the slot.
        """
        # Act
        booking = await book(mediator, student, slot, notes="First session")

        # Assert
        assert booking.status == BookingStatus.PENDING.value
        assert booking.amount == 80.0
        assert booking.currency == "USD"
        assert booking.course_id == slot.course_id
        assert booking.student_notes == "First session"
        assert slot.current_participants == 1
        assert slot.is_booked is True

    async def test_same_student_cannot_book_twice(self, mediator, student, slot):
        await book(mediator, student, slot)

        again = await mediator.send(CreateBookingCommand(student_id=student.id, availability_slot_id=slot.id))

        assert again.error_type == ErrorType.CONFLICT

    async def test_full_slot_is_refused(self, mediator, student, other_student, slot_factory):
        single = slot_factory(max_participants=1)
        await book(mediator, student, single)

        result = await mediator.send(CreateBookingCommand(student_id=other_student.id, availability_slot_id=single.id))

        assert result.error_type == ErrorType.FAILURE
        assert result.errors == ("Slot is at maximum capacity.",)

    async def test_started_slot_is_refused(self, mediator, student, slot_factory):
        started = slot_factory(start_in=timedelta(minutes=-10))

        result = await mediator.send(CreateBookingCommand(student_id=student.id, availability_slot_id=started.id))

        assert result.is_failure

    async def test_unknown_slot_and_student(self, mediator, student, slot):
        no_slot = await mediator.send(CreateBookingCommand(student_id=student.id, availability_slot_id=uuid.uuid4()))
        no_student = await mediator.send(CreateBookingCommand(student_id=uuid.uuid4(), availability_slot_id=slot.id))

        assert no_slot.error_type == ErrorType.NOT_FOUND
        assert no_student.error_type == ErrorType.NOT_FOUND

    async def test_inactive_student_cannot_book(self, mediator, session, student, slot):
        student.deactivate()
        session.commit()

        result = await mediator.send(CreateBookingCommand(student_id=student.id, availability_slot_id=slot.id))

        assert result.errors == ("Inactive users cannot create bookings.",)

    async def test_confirm_notifies_student(self, mediator, session, student, slot):
        booking = await book(mediator, student, slot)

        result = await mediator.send(
            ConfirmBookingCommand(booking_id=booking.id, meeting_url="https://meet.example.com/cardiac")
        )

        assert result.value.status == BookingStatus.CONFIRMED.value
        assert result.value.meeting_url == "https://meet.example.com/cardiac"
        types = [n.type for n in session.query(Notification).filter(Notification.user_id == student.id)]
        assert types == [NotificationType.BOOKING_CONFIRMATION]

    async def test_confirming_twice_is_an_invalid_operation(self, mediator, student, slot):
        booking = await confirmed_booking(mediator, student, slot)

        with pytest.raises(InvalidOperationError):
            await mediator.send(ConfirmBookingCommand(booking_id=booking.id))

    async def test_early_cancellation_refunds_in_full(self, mediator, student, slot):
        """
        Scenario: A confirmed booking three days out is cancelled.
        Expected: Full refund, and the seat goes back to the slot.
        """
        # Arrange
        booking = await confirmed_booking(mediator, student, slot)

        # Act
        result = await mediator.send(CancelBookingCommand(booking_id=booking.id, reason="Exam clash"))

        # Assert
        cancellation = result.value
        assert cancellation.booking.status == BookingStatus.CANCELLED.value
        assert cancellation.booking.cancellation_reason == "Exam clash"
        assert cancellation.refund_amount == 80.0
        assert cancellation.refund_currency == "USD"
        assert cancellation.within_cancellation_window is True
        assert slot.current_participants == 0
        assert slot.is_booked is False

    async def test_late_cancellation_refunds_half(self, mediator, student, slot_factory):
        soon = slot_factory(start_in=timedelta(hours=10))
        booking = await book(mediator, student, soon)

        result = await mediator.send(CancelBookingCommand(booking_id=booking.id, reason="Sick"))

        assert result.value.refund_amount == 40.0
        assert result.value.within_cancellation_window is False

    async def test_cancel_requires_reason(self, mediator, student, slot):
        booking = await book(mediator, student, slot)

        result = await mediator.send(CancelBookingCommand(booking_id=booking.id, reason="  "))

        assert result.error_type == ErrorType.VALIDATION

    async def test_cancelled_slot_seat_can_be_rebooked(self, mediator, student, other_student, slot_factory):
        single = slot_factory(max_participants=1)
        booking = await book(mediator, student, single)
        await mediator.send(CancelBookingCommand(booking_id=booking.id, reason="Changed plans"))

        rebooked = await book(mediator, other_student, single)

        assert rebooked.student_id == other_student.id

    async def test_reschedule_moves_the_seat(self, mediator, student, slot, slot_factory):
        # Arrange
        booking = await confirmed_booking(mediator, student, slot)
        later = slot_factory(start_in=timedelta(days=6))

        # Act
        result = await mediator.send(RescheduleBookingCommand(booking_id=booking.id, new_slot_id=later.id))

        # Assert
        moved = result.value
        assert moved.status == BookingStatus.RESCHEDULED.value
        assert moved.availability_slot_id == later.id
        assert moved.rescheduled_from_slot_id == slot.id
        assert slot.current_participants == 0
        assert later.current_participants == 1

    async def test_rescheduled_booking_can_still_finish(self, mediator, student, other_student, slot, slot_factory):
        """
        Scenario: Two confirmed bookings are moved to a later slot.
        Expected: One can be completed and the other marked as no-show on the new slot.
        """
        # Arrange
        first = await confirmed_booking(mediator, student, slot)
        second = await confirmed_booking(mediator, other_student, slot)
        later = slot_factory(start_in=timedelta(days=6))
        await mediator.send(RescheduleBookingCommand(booking_id=first.id, new_slot_id=later.id))
        await mediator.send(RescheduleBookingCommand(booking_id=second.id, new_slot_id=later.id))

        # Act
        completed = await mediator.send(CompleteBookingCommand(booking_id=first.id))
        no_show = await mediator.send(MarkBookingNoShowCommand(booking_id=second.id))

        # Assert
        assert completed.value.status == BookingStatus.COMPLETED.value
        assert no_show.value.status == BookingStatus.NO_SHOW.value

    async def test_rescheduled_booking_can_be_cancelled(self, mediator, student, slot, slot_factory):
        booking = await confirmed_booking(mediator, student, slot)
        later = slot_factory(start_in=timedelta(days=6))
        await mediator.send(RescheduleBookingCommand(booking_id=booking.id, new_slot_id=later.id))

        result = await mediator.send(CancelBookingCommand(booking_id=booking.id, reason="Exam clash"))

        assert result.value.booking.status == BookingStatus.CANCELLED.value
        assert later.current_participants == 0

    async def test_pending_booking_cannot_be_rescheduled(self, mediator, student, slot, slot_factory):
        booking = await book(mediator, student, slot)
        later = slot_factory(start_in=timedelta(days=6))

        with pytest.raises(InvalidOperationError):
            await mediator.send(RescheduleBookingCommand(booking_id=booking.id, new_slot_id=later.id))

        assert later.current_participants == 0

    async def test_complete_and_no_show_need_confirmation(self, mediator, student, other_student, slot):
        first = await confirmed_booking(mediator, student, slot)
        second = await book(mediator, other_student, slot)

        completed = await mediator.send(CompleteBookingCommand(booking_id=first.id))
        with pytest.raises(InvalidOperationError):
            await mediator.send(MarkBookingNoShowCommand(booking_id=second.id))

        assert completed.value.status == BookingStatus.COMPLETED.value

    async def test_notes_and_meeting_link(self, mediator, student, slot):
        booking = await book(mediator, student, slot)

        result = await mediator.send(
            UpdateBookingNotesCommand(
                booking_id=booking.id,
                instructor_notes="Bring stethoscope",
                meeting_url="https://meet.example.com/room-4",
            )
        )

        assert result.value.instructor_notes == "Bring stethoscope"
        assert result.value.meeting_url == "https://meet.example.com/room-4"

    async def test_missing_booking_is_not_found(self, mediator):
        result = await mediator.send(ConfirmBookingCommand(booking_id=uuid.uuid4()))

        assert result.error_type == ErrorType.NOT_FOUND

    async def test_listing_by_student_and_status(self, mediator, student, other_student, slot, instructor):
        await book(mediator, student, slot)
        await confirmed_booking(mediator, other_student, slot)

        mine = await mediator.send(GetBookingsQuery(student_id=student.id))
        confirmed = await mediator.send(GetBookingsQuery(status=BookingStatus.CONFIRMED))
        teaching = await mediator.send(GetBookingsQuery(instructor_id=instructor.id))

        assert [b.student_id for b in mine] == [student.id]
        assert [b.student_id for b in confirmed] == [other_student.id]
        assert len(teaching) == 2

    async def test_listing_is_refreshed_after_a_new_booking(self, mediator, student, other_student, slot):
        before = await mediator.send(GetBookingsQuery())
        await book(mediator, student, slot)
        after = await mediator.send(GetBookingsQuery())

        assert before == []
        assert len(after) == 1


@pytest.mark.asyncio
class TestPromoCodes:

    async def test_discount_applied_and_redeemed(self, mediator, student, slot):
        # Arrange
        await mediator.send(promo_command(max_uses=1))

        # Act
        booking = await book(mediator, student, slot, promo_code="spring20")

        # Assert
        assert booking.amount == 64.0
        assert booking.discount_amount == 16.0
        assert booking.promo_code_id is not None
        promo = await mediator.send(GetPromoCodeQuery(code="SPRING20"))
        assert promo.current_uses == 1

    async def test_exhausted_code_is_refused(self, mediator, student, other_student, slot):
        await mediator.send(promo_command(max_uses=1))
        await book(mediator, student, slot, promo_code="SPRING20")

        result = await mediator.send(
            CreateBookingCommand(student_id=other_student.id, availability_slot_id=slot.id, promo_code="SPRING20")
        )

        assert result.errors == ("Promo code is not valid.",)

    async def test_redemption_refreshes_cached_listing(self, mediator, student, slot):
        """
        Scenario: The promo listing is cached, then a booking uses up the last redemption.
        Expected: The next listing shows the redemption and the code as no longer valid.
        """
        # Arrange
        await mediator.send(promo_command(max_uses=1))
        before = await mediator.send(GetPromoCodesQuery())

        # Act
        await book(mediator, student, slot, promo_code="SPRING20")
        after = await mediator.send(GetPromoCodesQuery())

        # Assert
        assert (before[0].current_uses, before[0].is_currently_valid) == (0, True)
        assert (after[0].current_uses, after[0].is_currently_valid) == (1, False)

    async def test_code_limited_to_other_course(self, mediator, session, student, slot, course, instructor):
        other = Course.create(
            instructor_id=instructor.id,
            title="Dermatology Basics",
            description="Skin lesions.",
            price=Decimal("50"),
            duration_minutes=60,
            max_students=10,
            category="Dermatology",
        )
        session.add(other)
        session.commit()
        await mediator.send(promo_command(code="DERM10", applicable_course_ids=[other.id]))

        result = await mediator.send(
            CreateBookingCommand(student_id=student.id, availability_slot_id=slot.id, promo_code="DERM10")
        )

        assert result.errors == ("Promo code does not apply to this course.",)

    async def test_full_discount_leaves_nothing_to_book(self, mediator, student, slot):
        await mediator.send(promo_command(code="FREE100", discount_value=Decimal("100")))

        with pytest.raises(DomainValidationError):
            await mediator.send(
                CreateBookingCommand(student_id=student.id, availability_slot_id=slot.id, promo_code="FREE100")
            )

        assert slot.current_participants == 0

    async def test_unknown_code(self, mediator, student, slot):
        result = await mediator.send(
            CreateBookingCommand(student_id=student.id, availability_slot_id=slot.id, promo_code="NOPE1234")
        )

        assert result.error_type == ErrorType.NOT_FOUND

    async def test_duplicate_code_is_a_conflict(self, mediator):
        await mediator.send(promo_command())

        result = await mediator.send(promo_command())

        assert result.error_type == ErrorType.CONFLICT

    async def test_generated_code_when_none_given(self, mediator):
        result = await mediator.send(promo_command(code=None, discount_type=DiscountType.FIXED_AMOUNT))

        assert len(result.value.code) == 8
        assert result.value.code.isalnum()

    async def test_deactivated_code_drops_out_of_active_listing(self, mediator):
        await mediator.send(promo_command())
        await mediator.send(promo_command(code="AUTUMN15", discount_value=Decimal("15")))

        await mediator.send(SetPromoCodeActiveCommand(code="SPRING20", is_active=False))
        active = await mediator.send(GetPromoCodesQuery(active_only=True))
        everything = await mediator.send(GetPromoCodesQuery())

        assert [p.code for p in active] == ["AUTUMN15"]
        assert {p.code for p in everything} == {"SPRING20", "AUTUMN15"}

    async def test_invalid_percentage(self, mediator):
        result = await mediator.send(promo_command(discount_value=Decimal("120")))

        assert "Percentage discount cannot exceed 100." in result.errors


@pytest.mark.asyncio
class TestPayments:

    async def test_payment_lifecycle_with_partial_refund(self, mediator, session, student, slot):
        """
        Scenario: A booking is paid, confirmed by the provider, then partly refunded.
        Expected: Status moves Pending -> Succeeded -> PartiallyRefunded; the student is notified once.
        """
        # Arrange
        booking = await book(mediator, student, slot)

        # Act
        created = await mediator.send(
            CreatePaymentCommand(booking_id=booking.id, provider_transaction_id="txn_001")
        )
        succeeded = await mediator.send(MarkPaymentSucceededCommand(payment_id=created.value.id))
        refunded = await mediator.send(
            RefundPaymentCommand(payment_id=created.value.id, amount=Decimal("30"), reason="Partial attendance")
        )

        # Assert
        assert created.value.status == PaymentStatus.PENDING.value
        assert created.value.amount == 80.0
        assert succeeded.value.status == PaymentStatus.SUCCEEDED.value
        assert refunded.value.status == PaymentStatus.PARTIALLY_REFUNDED.value
        assert refunded.value.refund_amount == 30.0
        types = [n.type for n in session.query(Notification).filter(Notification.user_id == student.id)]
        assert types == [NotificationType.PAYMENT_CONFIRMATION]

    async def test_full_refund_by_default(self, mediator, student, slot):
        booking = await book(mediator, student, slot)
        payment = (await mediator.send(CreatePaymentCommand(booking_id=booking.id, provider_transaction_id="txn_2"))).value
        await mediator.send(MarkPaymentSucceededCommand(payment_id=payment.id))

        refunded = await mediator.send(RefundPaymentCommand(payment_id=payment.id, reason="Course cancelled"))

        assert refunded.value.status == PaymentStatus.REFUNDED.value
        assert refunded.value.refund_amount == 80.0

    async def test_pending_payment_cannot_be_refunded(self, mediator, student, slot):
        booking = await book(mediator, student, slot)
        payment = (await mediator.send(CreatePaymentCommand(booking_id=booking.id, provider_transaction_id="txn_3"))).value

        with pytest.raises(InvalidOperationError):
            await mediator.send(RefundPaymentCommand(payment_id=payment.id, reason="Too early"))

    async def test_failed_payment_notifies(self, mediator, session, student, slot):
        booking = await book(mediator, student, slot)
        payment = (await mediator.send(CreatePaymentCommand(booking_id=booking.id, provider_transaction_id="txn_4"))).value

        failed = await mediator.send(MarkPaymentFailedCommand(payment_id=payment.id, reason="Card declined"))

        assert failed.value.status == PaymentStatus.FAILED.value
        assert failed.value.failure_reason == "Card declined"
        types = [n.type for n in session.query(Notification).filter(Notification.user_id == student.id)]
        assert types == [NotificationType.PAYMENT_FAILED]

    async def test_cancel_payment(self, mediator, student, slot):
        booking = await book(mediator, student, slot)
        payment = (await mediator.send(CreatePaymentCommand(booking_id=booking.id, provider_transaction_id="txn_5"))).value

        cancelled = await mediator.send(CancelPaymentCommand(payment_id=payment.id))

        assert cancelled.value.status == PaymentStatus.CANCELLED.value

    async def test_no_payment_for_cancelled_booking(self, mediator, student, slot):
        booking = await book(mediator, student, slot)
        await mediator.send(CancelBookingCommand(booking_id=booking.id, reason="Changed plans"))

        result = await mediator.send(CreatePaymentCommand(booking_id=booking.id, provider_transaction_id="txn_6"))

        assert result.errors == ("Cannot create a payment for a cancelled booking.",)

    async def test_payments_by_user(self, mediator, student, slot):
        booking = await book(mediator, student, slot)
        await mediator.send(CreatePaymentCommand(booking_id=booking.id, provider_transaction_id="txn_7"))

        payments = await mediator.send(GetPaymentsByUserQuery(user_id=student.id))
        succeeded = await mediator.send(GetPaymentsByUserQuery(user_id=student.id, status=PaymentStatus.SUCCEEDED))

        assert [p.provider_transaction_id for p in payments] == ["txn_7"]
        assert succeeded == []
