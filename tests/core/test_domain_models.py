# tests/core/test_domain_models.py
import uuid
from datetime import timedelta
from decimal import Decimal

import pytest

from medicaledu.core.domain.entities import (
    AvailabilitySlot,
    Booking,
    Course,
    CourseMaterial,
    Enrollment,
    Payment,
    PromoCode,
    User,
)
from medicaledu.core.domain.entities.base import utcnow
from medicaledu.core.domain.enums import BookingStatus, DiscountType, PaymentProvider, PaymentStatus, UserRole
from medicaledu.core.domain.events import EventType
from medicaledu.core.domain.exceptions import DomainValidationError, InvalidOperationError
from medicaledu.core.domain.value_objects import Email, Money, Password, PhoneNumber, PromoCodeValue, Url

PASSWORD = "Str0ng!Pass"


def _slot(start_in=timedelta(days=3), max_participants=2, price=Decimal("80.00")):
    start = utcnow() + start_in
    return AvailabilitySlot.create(
        course_id=uuid.uuid4(),
        instructor_id=uuid.uuid4(),
        start_time_utc=start,
        end_time_utc=start + timedelta(hours=1),
        price=price,
        max_participants=max_participants,
    )


def _booking(slot, amount=Decimal("80.00")):
    booking = Booking.create(
        student_id=uuid.uuid4(),
        availability_slot_id=slot.id,
        amount=Money(amount=amount, currency="USD"),
    )
    booking.slot = slot
    return booking


def _material(title="Lecture"):
    return CourseMaterial.create(
        title=title,
        file_url=f"https://cdn.example.com/{title.lower()}.pdf",
        file_name=f"{title.lower()}.pdf",
        content_type="application/pdf",
    )


class TestMoney:
    def test_negative_amount_rejected(self):
        with pytest.raises(DomainValidationError):
            Money(amount=Decimal("-1"), currency="USD")

    def test_currency_is_normalized(self):
        assert Money(amount=Decimal("10"), currency="usd").currency == "USD"

    def test_invalid_currency_rejected(self):
        with pytest.raises(DomainValidationError):
            Money(amount=Decimal("10"), currency="DOLLARS")

    def test_add_and_subtract(self):
        a = Money(amount=Decimal("10.00"), currency="USD")
        b = Money(amount=Decimal("2.50"), currency="USD")
        assert a.add(b).amount == Decimal("12.50")
        assert a.subtract(b).amount == Decimal("7.50")

    def test_subtract_below_zero_fails(self):
        """Money never goes negative."""
        with pytest.raises(InvalidOperationError):
            Money(amount=Decimal("1"), currency="USD").subtract(Money(amount=Decimal("2"), currency="USD"))

    def test_mixed_currencies_fail(self):
        with pytest.raises(InvalidOperationError):
            Money(amount=Decimal("1"), currency="USD").add(Money(amount=Decimal("1"), currency="EUR"))

    def test_multiply_rounds_to_cents(self):
        assert Money(amount=Decimal("10.00"), currency="USD").multiply("0.333").amount == Decimal("3.33")

    def test_str(self):
        assert str(Money(amount=Decimal("10"), currency="USD")) == "10.00 USD"


class TestValueObjects:
    def test_email_is_lowercased(self):
        assert Email(value="  Ada.Grey@Example.COM ").value == "ada.grey@example.com"

    @pytest.mark.parametrize("value", ["", "no-at-sign", "two@@example.com"])
    def test_invalid_email(self, value):
        with pytest.raises(DomainValidationError):
            Email(value=value)

    def test_url_infers_https(self):
        url = Url(value="example.com/path")
        assert url.value == "https://example.com/path"
        assert url.is_secure
        assert url.host == "example.com"

    def test_phone_number_normalized_to_e164(self):
        assert PhoneNumber(value="0044 20 7946 0958").value == "+442079460958"

    @pytest.mark.parametrize("plain", ["short1!", "alllowercase1!", "NoDigits!!", "NoSpecial123"])
    def test_weak_passwords_rejected(self, plain):
        with pytest.raises(DomainValidationError):
            Password.create(plain)

    def test_password_verify(self):
        password = Password.create(PASSWORD)
        assert password.verify(PASSWORD)
        assert not password.verify("Wr0ng!Pass")
        assert PASSWORD not in password.hashed

    def test_promo_code_value_is_normalized(self):
        assert PromoCodeValue(value="spring 24").value == "SPRING24"

    def test_promo_code_value_rejects_symbols(self):
        with pytest.raises(DomainValidationError):
            PromoCodeValue(value="SAVE-10")

    def test_generated_promo_code_is_valid(self):
        assert len(PromoCodeValue.generate(12).value) == 12


class TestUser:
    def test_create_hashes_password(self):
        user = User.create(name="Ada", email="ADA@example.com", password=PASSWORD, role=UserRole.INSTRUCTOR)
        assert user.email == "ada@example.com"
        assert user.password_hash != PASSWORD
        assert user.verify_password(PASSWORD)
        assert user.is_active and not user.email_confirmed

    def test_confirm_email(self):
        user = User.create(name="Ada", email="ada@example.com", password=PASSWORD)
        token = user.generate_email_confirmation_token()

        with pytest.raises(InvalidOperationError):
            user.confirm_email("not-the-token")
        user.confirm_email(token)

        assert user.email_confirmed
        assert user.email_confirmation_token is None

    def test_repeated_failures_lock_the_account(self):
        user = User.create(name="Ada", email="ada@example.com", password=PASSWORD)
        for _ in range(3):
            user.record_login_failure(max_allowed_attempts=3, lock_duration=timedelta(minutes=15))

        assert user.is_locked
        user.record_login_success()
        assert not user.is_locked
        assert user.failed_login_attempts == 0

    def test_reset_password_lifts_lock(self):
        user = User.create(name="Ada", email="ada@example.com", password=PASSWORD)
        user.lock_account(timedelta(minutes=5))
        token = user.generate_password_reset_token()

        user.reset_password(token, "N3w!Password")

        assert user.verify_password("N3w!Password")
        assert not user.is_locked
        assert user.password_reset_token is None

    def test_deactivate_twice_fails(self):
        user = User.create(name="Ada", email="ada@example.com", password=PASSWORD)
        user.deactivate()
        with pytest.raises(InvalidOperationError):
            user.deactivate()


class TestCourse:
    def _course(self):
        return Course.create(instructor_id=uuid.uuid4(), title="Renal Physiology", price=Decimal("50"))

    def test_publish_requires_materials(self):
        course = self._course()
        with pytest.raises(InvalidOperationError, match="without materials"):
            course.publish()

    def test_publish_and_unpublish(self):
        course = self._course()
        course.add_material(_material())
        course.publish()
        assert course.is_published and course.published_at is not None

        course.unpublish()
        assert not course.is_published and course.published_at is None

    def test_deactivate_is_soft_delete(self):
        course = self._course()
        course.deactivate()
        assert not course.is_active
        assert course.deleted_at is not None
        course.activate()
        assert course.is_active

    def test_reorder_materials(self):
        course = self._course()
        first, second = _material("Intro"), _material("Nephron")
        course.add_material(first)
        course.add_material(second)

        course.reorder_materials([second.id, first.id])

        assert second.sort_order == 1
        assert first.sort_order == 2

    def test_reorder_requires_every_material(self):
        course = self._course()
        course.add_material(_material("Intro"))
        course.add_material(_material("Nephron"))
        with pytest.raises(DomainValidationError):
            course.reorder_materials([course.materials[0].id])

    def test_booked_slot_cannot_be_removed(self):
        course = self._course()
        slot = _slot()
        course.add_availability_slot(slot)
        slot.reserve()
        with pytest.raises(InvalidOperationError):
            course.remove_availability_slot(slot.id)

    def test_events_are_recorded(self):
        course = self._course()
        course.add_material(_material())
        course.publish()
        types = [event.type for event in course.domain_events]
        assert types == [EventType.COURSE_CREATED, EventType.COURSE_MATERIAL_ADDED, EventType.COURSE_PUBLISHED]
        course.clear_domain_events()
        assert course.domain_events == []


class TestAvailabilitySlot:
    def test_end_must_follow_start(self):
        start = utcnow()
        with pytest.raises(DomainValidationError):
            AvailabilitySlot.create(
                course_id=uuid.uuid4(),
                instructor_id=uuid.uuid4(),
                start_time_utc=start,
                end_time_utc=start,
                price=Decimal("10"),
            )

    def test_reserve_until_full_then_release(self):
        slot = _slot(max_participants=2)

        slot.reserve()
        assert slot.is_booked and slot.current_participants == 1
        slot.reserve()
        assert slot.is_at_full_capacity
        with pytest.raises(InvalidOperationError):
            slot.reserve()

        slot.unreserve()
        assert slot.is_booked and slot.current_participants == 1
        slot.unreserve()
        assert not slot.is_booked and slot.current_participants == 0

    def test_recurrence(self):
        slot = _slot()
        slot.set_recurring("WEEKLY")
        assert slot.is_recurring
        slot.cancel_recurring()
        assert not slot.is_recurring and slot.recurring_pattern is None


class TestBooking:
    def test_zero_amount_rejected(self):
        with pytest.raises(DomainValidationError):
            _booking(_slot(), amount=Decimal("0"))

    def test_lifecycle(self):
        booking = _booking(_slot())
        assert booking.status == BookingStatus.PENDING

        booking.confirm()
        assert booking.status == BookingStatus.CONFIRMED
        booking.complete()
        assert booking.status == BookingStatus.COMPLETED

        with pytest.raises(InvalidOperationError):
            booking.cancel("Too late")

    def test_cancel_requires_reason(self):
        booking = _booking(_slot())
        with pytest.raises(DomainValidationError):
            booking.cancel("  ")

    def test_reschedule_requires_confirmed(self):
        booking = _booking(_slot())
        with pytest.raises(InvalidOperationError):
            booking.reschedule(uuid.uuid4())

    def test_reschedule_keeps_previous_slot(self):
        slot = _slot()
        booking = _booking(slot)
        booking.confirm()
        new_slot_id = uuid.uuid4()

        booking.reschedule(new_slot_id)

        assert booking.status == BookingStatus.RESCHEDULED
        assert booking.rescheduled_from_slot_id == slot.id
        assert booking.availability_slot_id == new_slot_id

    def test_rescheduled_booking_keeps_confirmed_transitions(self):
        booking = _booking(_slot())
        booking.confirm()
        booking.reschedule(uuid.uuid4())

        assert booking.can_be_cancelled()
        assert booking.can_be_completed()
        booking.reschedule(uuid.uuid4())
        booking.complete()
        assert booking.status == BookingStatus.COMPLETED

    def test_early_cancellation_is_fully_refunded(self):
        booking = _booking(_slot(start_in=timedelta(days=3)))
        booking.cancel("Schedule conflict")

        assert booking.is_within_cancellation_window(booking.cancelled_at)
        assert booking.refund_amount().amount == Decimal("80.00")

    def test_late_cancellation_is_half_refunded(self):
        booking = _booking(_slot(start_in=timedelta(hours=2)))
        booking.cancel("Feeling unwell")

        assert not booking.is_within_cancellation_window(booking.cancelled_at)
        assert booking.refund_amount().amount == Decimal("40.00")

    def test_no_refund_unless_cancelled(self):
        booking = _booking(_slot())
        assert booking.refund_amount().is_zero


class TestPayment:
    def _payment(self):
        return Payment.create(
            booking_id=uuid.uuid4(),
            user_id=uuid.uuid4(),
            amount=Money(amount=Decimal("80.00"), currency="USD"),
            provider=PaymentProvider.STRIPE,
            provider_transaction_id="txn_123",
        )

    def test_only_succeeded_payments_refund(self):
        payment = self._payment()
        with pytest.raises(InvalidOperationError):
            payment.refund(Decimal("10"), "Goodwill")

    def test_partial_then_full_refund_status(self):
        partial = self._payment()
        partial.mark_succeeded()
        partial.refund(Decimal("20.00"), "Late start")
        assert partial.status == PaymentStatus.PARTIALLY_REFUNDED

        full = self._payment()
        full.mark_succeeded()
        full.refund(Decimal("80.00"), "Session cancelled")
        assert full.status == PaymentStatus.REFUNDED

    def test_refund_cannot_exceed_amount(self):
        payment = self._payment()
        payment.mark_succeeded()
        with pytest.raises(DomainValidationError):
            payment.refund(Decimal("80.01"), "Too much")

    def test_failure_requires_reason(self):
        payment = self._payment()
        with pytest.raises(DomainValidationError):
            payment.mark_failed("")


class TestPromoCode:
    def _promo(self, discount_type=DiscountType.PERCENTAGE, value=Decimal("20"), **kwargs):
        now = utcnow()
        return PromoCode.create(
            code="spring24",
            discount_type=discount_type,
            discount_value=value,
            valid_from=now - timedelta(days=1),
            valid_until=now + timedelta(days=30),
            **kwargs,
        )

    def test_percentage_discount(self):
        promo = self._promo()
        assert promo.code == "SPRING24"
        assert promo.discount_for(Money(amount=Decimal("80"), currency="USD")).amount == Decimal("16.00")

    def test_fixed_discount_is_capped_at_amount(self):
        promo = self._promo(DiscountType.FIXED_AMOUNT, Decimal("100"))
        assert promo.discount_for(Money(amount=Decimal("80"), currency="USD")).amount == Decimal("80")

    def test_percentage_over_100_rejected(self):
        with pytest.raises(DomainValidationError):
            self._promo(value=Decimal("150"))

    def test_redeem_until_exhausted(self):
        promo = self._promo(max_uses=1)
        promo.redeem()
        assert promo.is_exhausted
        assert not promo.is_valid_at()
        with pytest.raises(InvalidOperationError):
            promo.redeem()

    def test_course_restriction(self):
        allowed = uuid.uuid4()
        promo = self._promo(applicable_course_ids=[allowed])
        assert promo.applies_to(allowed)
        assert not promo.applies_to(uuid.uuid4())

    def test_outside_validity_window(self):
        promo = self._promo()
        assert not promo.is_valid_at(utcnow() + timedelta(days=31))


class TestEnrollment:
    def test_progress_bounds(self):
        enrollment = Enrollment.create(student_id=uuid.uuid4(), course_id=uuid.uuid4())
        with pytest.raises(DomainValidationError):
            enrollment.update_progress(101)

    def test_complete_sets_full_progress(self):
        enrollment = Enrollment.create(student_id=uuid.uuid4(), course_id=uuid.uuid4())
        enrollment.complete()
        assert enrollment.is_completed
        assert enrollment.progress_percentage == 100
        with pytest.raises(InvalidOperationError):
            enrollment.update_progress(50)
