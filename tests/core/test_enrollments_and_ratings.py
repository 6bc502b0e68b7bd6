# tests/core/test_enrollments_and_ratings.py
import uuid
from datetime import timedelta

import pytest

from medicaledu.core.application.features.bookings.requests import (
    CompleteBookingCommand,
    ConfirmBookingCommand,
    CreateBookingCommand,
)
from medicaledu.core.application.features.courses.requests import GetCourseByIdQuery
from medicaledu.core.application.features.enrollments.requests import (
    CompleteEnrollmentCommand,
    DeactivateEnrollmentCommand,
    EnrollInCourseCommand,
    GetEnrollmentsByCourseQuery,
    GetEnrollmentsByUserQuery,
    ReactivateEnrollmentCommand,
    UpdateEnrollmentProgressCommand,
)
from medicaledu.core.application.features.notifications.requests import (
    CreateNotificationCommand,
    GetNotificationsByUserQuery,
    MarkAllNotificationsReadCommand,
    MarkNotificationReadCommand,
)
from medicaledu.core.application.features.ratings.requests import (
    GetCourseRatingsQuery,
    GetInstructorRatingsQuery,
    RateCourseCommand,
    RateInstructorCommand,
)
from medicaledu.core.application.result import ErrorType
from medicaledu.core.domain.enums import NotificationType
from medicaledu.core.domain.exceptions import InvalidOperationError


async def enroll(mediator, student, course):
    result = await mediator.send(EnrollInCourseCommand(student_id=student.id, course_id=course.id))
    assert result.is_success, result.errors
    return result.value


async def completed_booking(mediator, student, slot):
    created = await mediator.send(CreateBookingCommand(student_id=student.id, availability_slot_id=slot.id))
    await mediator.send(ConfirmBookingCommand(booking_id=created.value.id))
    completed = await mediator.send(CompleteBookingCommand(booking_id=created.value.id))
    return completed.value


@pytest.mark.asyncio
class TestEnrollments:

    async def test_enroll_and_count(self, mediator, student, course):
        # Act
        enrollment = await enroll(mediator, student, course)

        # Assert
        assert enrollment.is_active is True
        assert enrollment.progress_percentage == 0
        assert enrollment.course_title == "Cardiac Anatomy"
        detail = await mediator.send(GetCourseByIdQuery(course_id=course.id))
        assert detail.enrollment_count == 1

    async def test_enrolling_twice_is_a_conflict(self, mediator, student, course):
        await enroll(mediator, student, course)

        again = await mediator.send(EnrollInCourseCommand(student_id=student.id, course_id=course.id))

        assert again.error_type == ErrorType.CONFLICT

    async def test_instructor_cannot_enroll(self, mediator, instructor, course):
        result = await mediator.send(EnrollInCourseCommand(student_id=instructor.id, course_id=course.id))

        assert result.errors == ("Only students can enroll in courses.",)

    async def test_course_capacity(self, mediator, student, other_student, user_factory, course):
        """
        Scenario: The course takes two students and a third tries to enroll.
        Expected: The third is refused; deactivating one enrollment makes room again.
        """
        # Arrange
        first = await enroll(mediator, student, course)
        await enroll(mediator, other_student, course)
        third = user_factory("Kai Moreno", "kai.moreno@example.com")

        # Act
        refused = await mediator.send(EnrollInCourseCommand(student_id=third.id, course_id=course.id))
        await mediator.send(DeactivateEnrollmentCommand(enrollment_id=first.id))
        admitted = await mediator.send(EnrollInCourseCommand(student_id=third.id, course_id=course.id))

        # Assert
        assert refused.errors == ("Course has reached its maximum number of students.",)
        assert admitted.is_success

    async def test_unpublished_course_is_closed(self, mediator, session, student, course):
        course.unpublish()
        session.commit()

        result = await mediator.send(EnrollInCourseCommand(student_id=student.id, course_id=course.id))

        assert result.errors == ("Course is not open for enrollment.",)

    async def test_re_enrolling_reactivates_the_same_enrollment(self, mediator, student, course):
        first = await enroll(mediator, student, course)
        await mediator.send(DeactivateEnrollmentCommand(enrollment_id=first.id))

        again = await enroll(mediator, student, course)

        assert again.id == first.id
        assert again.is_active is True

    async def test_progress_then_completion(self, mediator, student, course):
        enrollment = await enroll(mediator, student, course)

        progressed = await mediator.send(
            UpdateEnrollmentProgressCommand(enrollment_id=enrollment.id, progress_percentage=40)
        )
        completed = await mediator.send(CompleteEnrollmentCommand(enrollment_id=enrollment.id))

        assert progressed.value.progress_percentage == 40
        assert progressed.value.last_accessed_at is not None
        assert completed.value.is_completed is True
        assert completed.value.progress_percentage == 100

    async def test_progress_after_completion_is_rejected(self, mediator, student, course):
        enrollment = await enroll(mediator, student, course)
        await mediator.send(CompleteEnrollmentCommand(enrollment_id=enrollment.id))

        with pytest.raises(InvalidOperationError):
            await mediator.send(UpdateEnrollmentProgressCommand(enrollment_id=enrollment.id, progress_percentage=50))

    async def test_progress_out_of_range(self, mediator, student, course):
        enrollment = await enroll(mediator, student, course)

        result = await mediator.send(
            UpdateEnrollmentProgressCommand(enrollment_id=enrollment.id, progress_percentage=101)
        )

        assert result.error_type == ErrorType.VALIDATION

    async def test_reactivate_when_full(self, mediator, student, other_student, user_factory, course):
        first = await enroll(mediator, student, course)
        await mediator.send(DeactivateEnrollmentCommand(enrollment_id=first.id))
        await enroll(mediator, other_student, course)
        await enroll(mediator, user_factory("Kai Moreno", "kai.moreno@example.com"), course)

        result = await mediator.send(ReactivateEnrollmentCommand(enrollment_id=first.id))

        assert result.is_failure

    async def test_listings(self, mediator, student, other_student, course):
        mine = await enroll(mediator, student, course)
        theirs = await enroll(mediator, other_student, course)
        await mediator.send(DeactivateEnrollmentCommand(enrollment_id=theirs.id))

        by_user = await mediator.send(GetEnrollmentsByUserQuery(student_id=student.id))
        active_in_course = await mediator.send(GetEnrollmentsByCourseQuery(course_id=course.id, active_only=True))
        all_in_course = await mediator.send(GetEnrollmentsByCourseQuery(course_id=course.id))

        assert [e.id for e in by_user] == [mine.id]
        assert [e.id for e in active_in_course] == [mine.id]
        assert len(all_in_course) == 2

    async def test_missing_enrollment(self, mediator):
        result = await mediator.send(CompleteEnrollmentCommand(enrollment_id=uuid.uuid4()))

        assert result.error_type == ErrorType.NOT_FOUND


@pytest.mark.asyncio
class TestRatings:

    async def test_only_enrolled_students_rate_courses(self, mediator, student, course):
        result = await mediator.send(RateCourseCommand(course_id=course.id, student_id=student.id, rating=5))

        assert result.errors == ("Only enrolled students can rate a course.",)

    async def test_rating_again_replaces_the_first(self, mediator, student, course):
        await enroll(mediator, student, course)

        first = await mediator.send(RateCourseCommand(course_id=course.id, student_id=student.id, rating=2))
        second = await mediator.send(
            RateCourseCommand(course_id=course.id, student_id=student.id, rating=4, review="Much clearer second time")
        )

        assert first.value.id == second.value.id
        summary = await mediator.send(GetCourseRatingsQuery(course_id=course.id))
        assert summary.rating_count == 1
        assert summary.average_rating == 4.0

    async def test_course_summary_counts_public_ratings_only(self, mediator, student, other_student, course):
        """
        Scenario: One public 5-star and one private 1-star rating.
        Expected: The summary and the course detail only reflect the public one.
        """
        # Arrange
        await enroll(mediator, student, course)
        await enroll(mediator, other_student, course)

        # Act
        await mediator.send(RateCourseCommand(course_id=course.id, student_id=student.id, rating=5))
        await mediator.send(
            RateCourseCommand(course_id=course.id, student_id=other_student.id, rating=1, is_public=False)
        )

        # Assert
        summary = await mediator.send(GetCourseRatingsQuery(course_id=course.id))
        detail = await mediator.send(GetCourseByIdQuery(course_id=course.id))
        assert summary.average_rating == 5.0
        assert summary.rating_count == 1
        assert detail.average_rating == 5.0

    async def test_rating_out_of_range(self, mediator, student, course):
        await enroll(mediator, student, course)

        result = await mediator.send(RateCourseCommand(course_id=course.id, student_id=student.id, rating=6))

        assert result.errors == ("Rating: Input should be less than or equal to 5",)

    async def test_instructor_rated_after_completed_session(self, mediator, student, instructor, slot):
        booking = await completed_booking(mediator, student, slot)

        rated = await mediator.send(
            RateInstructorCommand(booking_id=booking.id, student_id=student.id, rating=5, review="Excellent")
        )
        summary = await mediator.send(GetInstructorRatingsQuery(instructor_id=instructor.id))

        assert rated.value.instructor_id == instructor.id
        assert summary.average_rating == 5.0
        assert [r.review for r in summary.ratings] == ["Excellent"]

    async def test_instructor_rating_needs_completed_session(self, mediator, student, slot):
        created = await mediator.send(CreateBookingCommand(student_id=student.id, availability_slot_id=slot.id))

        result = await mediator.send(
            RateInstructorCommand(booking_id=created.value.id, student_id=student.id, rating=4)
        )

        assert result.errors == ("Only completed sessions can be rated.",)

    async def test_only_the_booking_student_rates(self, mediator, student, other_student, slot):
        booking = await completed_booking(mediator, student, slot)

        result = await mediator.send(RateInstructorCommand(booking_id=booking.id, student_id=other_student.id, rating=1))

        assert result.error_type == ErrorType.UNAUTHORIZED


@pytest.mark.asyncio
class TestNotifications:

    async def test_create_and_read(self, mediator, student):
        created = await mediator.send(
            CreateNotificationCommand(user_id=student.id, title="Welcome", message="Your account is ready.")
        )

        read = await mediator.send(MarkNotificationReadCommand(notification_id=created.value.id))

        assert created.value.type == NotificationType.GENERAL_ANNOUNCEMENT
        assert created.value.is_read is False
        assert read.value.is_read is True
        assert read.value.read_at is not None

    async def test_reading_twice_is_rejected(self, mediator, student):
        created = await mediator.send(CreateNotificationCommand(user_id=student.id, title="Hi", message="Hello"))
        await mediator.send(MarkNotificationReadCommand(notification_id=created.value.id))

        with pytest.raises(InvalidOperationError):
            await mediator.send(MarkNotificationReadCommand(notification_id=created.value.id))

    async def test_mark_all_read(self, mediator, student):
        for title in ("One", "Two", "Three"):
            await mediator.send(CreateNotificationCommand(user_id=student.id, title=title, message="..."))

        changed = await mediator.send(MarkAllNotificationsReadCommand(user_id=student.id))
        unread = await mediator.send(GetNotificationsByUserQuery(user_id=student.id, unread_only=True))

        assert changed.value == 3
        assert unread == []

    async def test_unread_listing_is_refreshed(self, mediator, student):
        before = await mediator.send(GetNotificationsByUserQuery(user_id=student.id, unread_only=True))
        await mediator.send(CreateNotificationCommand(user_id=student.id, title="Reminder", message="Session tomorrow"))
        after = await mediator.send(GetNotificationsByUserQuery(user_id=student.id, unread_only=True))

        assert before == []
        assert [n.title for n in after] == ["Reminder"]

    async def test_unknown_user(self, mediator):
        result = await mediator.send(CreateNotificationCommand(user_id=uuid.uuid4(), title="Hi", message="Hello"))

        assert result.error_type == ErrorType.NOT_FOUND

    async def test_blank_title_rejected(self, mediator, student):
        result = await mediator.send(CreateNotificationCommand(user_id=student.id, title=" ", message="Hello"))

        assert result.errors == ("Title: String should have at least 1 character",)

    async def test_scheduled_reminder(self, mediator, student, slot):
        when = slot.start_time_utc - timedelta(hours=1)

        created = await mediator.send(
            CreateNotificationCommand(
                user_id=student.id,
                type=NotificationType.BOOKING_REMINDER,
                title="Session soon",
                message="Starts in one hour.",
                related_entity_id=slot.id,
                related_entity_type="AvailabilitySlot",
                scheduled_for=when,
            )
        )

        assert created.value.scheduled_for == when
        assert created.value.related_entity_type == "AvailabilitySlot"
