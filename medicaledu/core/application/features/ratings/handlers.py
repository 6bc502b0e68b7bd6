# medicaledu/core/application/features/ratings/handlers.py
from __future__ import annotations

import structlog

from medicaledu.core.application.features.ratings.models import (
    CourseRatingResponse,
    CourseRatingsResponse,
    InstructorRatingResponse,
    InstructorRatingsResponse,
)
from medicaledu.core.application.features.ratings.requests import (
    GetCourseRatingsQuery,
    GetInstructorRatingsQuery,
    RateCourseCommand,
    RateInstructorCommand,
)
from medicaledu.core.application.mediator import Handler, handles
from medicaledu.core.application.result import Result
from medicaledu.core.domain.entities import CourseRating, InstructorRating
from medicaledu.core.domain.enums import BookingStatus

logger = structlog.get_logger()


@handles(RateCourseCommand)
class RateCourseHandler(Handler):
    def handle(self, request: RateCourseCommand) -> Result[CourseRatingResponse]:
        course = self.uow.courses.get_by_id(request.course_id)
        if course is None:
            return Result.not_found(f"Course with ID {request.course_id} not found.")

        enrollment = self.uow.enrollments.get_for_student(student_id=request.student_id, course_id=course.id)
        if enrollment is None:
            return Result.failure("Only enrolled students can rate a course.")

        rating = self.uow.ratings.get_course_rating(course_id=course.id, student_id=request.student_id)
        if rating is None:
            rating = CourseRating.create(
                course_id=course.id,
                student_id=request.student_id,
                rating=request.rating,
                review=request.review,
                is_public=request.is_public,
            )
            rating.course = course
            self.uow.ratings.add(rating)
        else:
            rating.update_rating(request.rating)
            rating.update_review(request.review)
            rating.set_visibility(request.is_public)

        logger.info("course_rated", course_id=str(course.id), rating=request.rating)
        return Result.success(CourseRatingResponse.from_entity(rating))


@handles(RateInstructorCommand)
class RateInstructorHandler(Handler):
    def handle(self, request: RateInstructorCommand) -> Result[InstructorRatingResponse]:
        booking = self.uow.bookings.get_by_id(request.booking_id)
        if booking is None:
            return Result.not_found(f"Booking with ID {request.booking_id} not found.")
        if booking.student_id != request.student_id:
            return Result.unauthorized("Only the student who made the booking can rate the instructor.")
        if booking.status != BookingStatus.COMPLETED:
            return Result.failure("Only completed sessions can be rated.")

        rating = self.uow.ratings.get_instructor_rating(booking_id=booking.id, student_id=request.student_id)
        if rating is None:
            rating = InstructorRating.create(
                instructor_id=booking.slot.instructor_id,
                student_id=request.student_id,
                booking_id=booking.id,
                rating=request.rating,
                review=request.review,
                is_public=request.is_public,
            )
            self.uow.ratings.add(rating)
        else:
            rating.update_rating(request.rating)
            rating.update_review(request.review)
            rating.set_visibility(request.is_public)

        logger.info("instructor_rated", instructor_id=str(rating.instructor_id), rating=request.rating)
        return Result.success(InstructorRatingResponse.from_entity(rating))


@handles(GetCourseRatingsQuery)
class GetCourseRatingsHandler(Handler):
    def handle(self, request: GetCourseRatingsQuery) -> CourseRatingsResponse:
        average, count = self.uow.ratings.course_summary(request.course_id)
        ratings = self.uow.ratings.list_course_ratings(request.course_id)
        return CourseRatingsResponse(
            course_id=request.course_id,
            average_rating=round(average, 2) if average is not None else None,
            rating_count=count,
            ratings=[CourseRatingResponse.from_entity(rating) for rating in ratings],
        )


@handles(GetInstructorRatingsQuery)
class GetInstructorRatingsHandler(Handler):
    def handle(self, request: GetInstructorRatingsQuery) -> InstructorRatingsResponse:
        average, count = self.uow.ratings.instructor_summary(request.instructor_id)
        ratings = self.uow.ratings.list_instructor_ratings(request.instructor_id)
        return InstructorRatingsResponse(
            instructor_id=request.instructor_id,
            average_rating=round(average, 2) if average is not None else None,
            rating_count=count,
            ratings=[InstructorRatingResponse.from_entity(rating) for rating in ratings],
        )
