# medicaledu/core/application/features/ratings/requests.py
from __future__ import annotations

from datetime import timedelta
from typing import ClassVar, Optional
from uuid import UUID

from medicaledu.core.application.caching import CachePrefixes, cache_invalidation
from medicaledu.core.application.features.courses.requests import COURSE_DATA
from medicaledu.core.application.features.ratings.models import (
    CourseRatingResponse,
    CourseRatingsResponse,
    InstructorRatingResponse,
    InstructorRatingsResponse,
)
from medicaledu.core.application.requests import CacheableRequest, Command
from medicaledu.core.application.result import Result


@cache_invalidation((CachePrefixes.GET_COURSE_RATINGS,), reason="Course rating list and summary change")
@cache_invalidation(COURSE_DATA, reason="Course average rating changes")
class RateCourseCommand(Command):
    """Rate a course; rating it again replaces the student's earlier rating."""

    response_type: ClassVar = Result[CourseRatingResponse]

    course_id: UUID
    student_id: UUID
    rating: int
    review: Optional[str] = None
    is_public: bool = True


@cache_invalidation((CachePrefixes.GET_INSTRUCTOR_RATINGS,), reason="Instructor rating list and summary change")
class RateInstructorCommand(Command):
    response_type: ClassVar = Result[InstructorRatingResponse]

    booking_id: UUID
    student_id: UUID
    rating: int
    review: Optional[str] = None
    is_public: bool = True


class GetCourseRatingsQuery(CacheableRequest):
    response_type: ClassVar = CourseRatingsResponse
    cache_duration: ClassVar[timedelta] = timedelta(minutes=10)
    cache_prefix: ClassVar[str] = CachePrefixes.GET_COURSE_RATINGS

    course_id: UUID


class GetInstructorRatingsQuery(CacheableRequest):
    response_type: ClassVar = InstructorRatingsResponse
    cache_duration: ClassVar[timedelta] = timedelta(minutes=10)
    cache_prefix: ClassVar[str] = CachePrefixes.GET_INSTRUCTOR_RATINGS

    instructor_id: UUID
