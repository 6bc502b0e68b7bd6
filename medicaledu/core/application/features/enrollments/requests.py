# medicaledu/core/application/features/enrollments/requests.py
from __future__ import annotations

from datetime import timedelta
from typing import ClassVar, List, Optional
from uuid import UUID

from medicaledu.core.application.caching import CachePrefixes, cache_invalidation
from medicaledu.core.application.features.courses.requests import COURSE_DATA
from medicaledu.core.application.features.enrollments.models import EnrollmentResponse
from medicaledu.core.application.requests import CacheableRequest, Command, Request
from medicaledu.core.application.result import Result

ENROLLMENT_LISTINGS = (
    CachePrefixes.GET_ENROLLMENTS,
    CachePrefixes.GET_ENROLLMENTS_BY_USER,
    CachePrefixes.GET_ENROLLMENTS_BY_COURSE,
)


@cache_invalidation(ENROLLMENT_LISTINGS, reason="New enrollment appears in enrollment listings")
@cache_invalidation(COURSE_DATA, reason="Course enrollment count changes")
class EnrollInCourseCommand(Command):
    response_type: ClassVar = Result[EnrollmentResponse]

    student_id: UUID
    course_id: UUID


@cache_invalidation(ENROLLMENT_LISTINGS, reason="Enrollment progress changes")
class UpdateEnrollmentProgressCommand(Command):
    response_type: ClassVar = Result[EnrollmentResponse]

    enrollment_id: UUID
    progress_percentage: int


@cache_invalidation(ENROLLMENT_LISTINGS, reason="Enrollment completed")
class CompleteEnrollmentCommand(Command):
    response_type: ClassVar = Result[EnrollmentResponse]

    enrollment_id: UUID


@cache_invalidation(ENROLLMENT_LISTINGS, reason="Enrollment deactivated")
@cache_invalidation(COURSE_DATA, reason="Course enrollment count changes")
class DeactivateEnrollmentCommand(Command):
    response_type: ClassVar = Result[EnrollmentResponse]

    enrollment_id: UUID


@cache_invalidation(ENROLLMENT_LISTINGS, reason="Enrollment reactivated")
@cache_invalidation(COURSE_DATA, reason="Course enrollment count changes")
class ReactivateEnrollmentCommand(Command):
    response_type: ClassVar = Result[EnrollmentResponse]

    enrollment_id: UUID


class GetEnrollmentByIdQuery(Request):
    response_type: ClassVar = Optional[EnrollmentResponse]

    enrollment_id: UUID


class GetEnrollmentsByUserQuery(CacheableRequest):
    response_type: ClassVar = List[EnrollmentResponse]
    cache_duration: ClassVar[timedelta] = timedelta(minutes=10)
    cache_prefix: ClassVar[str] = CachePrefixes.GET_ENROLLMENTS_BY_USER

    student_id: UUID
    active_only: bool = False


class GetEnrollmentsByCourseQuery(CacheableRequest):
    response_type: ClassVar = List[EnrollmentResponse]
    cache_duration: ClassVar[timedelta] = timedelta(minutes=10)
    cache_prefix: ClassVar[str] = CachePrefixes.GET_ENROLLMENTS_BY_COURSE

    course_id: UUID
    active_only: bool = False
