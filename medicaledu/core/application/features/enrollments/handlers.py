# medicaledu/core/application/features/enrollments/handlers.py
from __future__ import annotations

from typing import List, Optional

import structlog

from medicaledu.core.application.features.enrollments.models import EnrollmentResponse
from medicaledu.core.application.features.enrollments.requests import (
    CompleteEnrollmentCommand,
    DeactivateEnrollmentCommand,
    EnrollInCourseCommand,
    GetEnrollmentByIdQuery,
    GetEnrollmentsByCourseQuery,
    GetEnrollmentsByUserQuery,
    ReactivateEnrollmentCommand,
    UpdateEnrollmentProgressCommand,
)
from medicaledu.core.application.mediator import Handler, handles
from medicaledu.core.application.result import Result
from medicaledu.core.domain.entities import Enrollment
from medicaledu.core.domain.enums import UserRole

logger = structlog.get_logger()


class EnrollmentHandler(Handler):
    def _get_enrollment(self, enrollment_id) -> Optional[Enrollment]:
        return self.uow.enrollments.get_by_id(enrollment_id)

    @staticmethod
    def _missing(enrollment_id) -> Result:
        return Result.not_found(f"Enrollment with ID {enrollment_id} not found.")

    def _course_is_full(self, course) -> bool:
        return course.max_students is not None and self.uow.enrollments.count_active(course.id) >= course.max_students


@handles(EnrollInCourseCommand)
class EnrollInCourseHandler(EnrollmentHandler):
    def handle(self, request: EnrollInCourseCommand) -> Result[EnrollmentResponse]:
        student = self.uow.users.get_by_id(request.student_id)
        if student is None:
            return Result.not_found(f"User with ID {request.student_id} not found.")
        if student.role != UserRole.STUDENT:
            return Result.failure("Only students can enroll in courses.")

        course = self.uow.courses.get_by_id(request.course_id)
        if course is None:
            return Result.not_found(f"Course with ID {request.course_id} not found.")
        if not course.is_published or not course.is_active:
            return Result.failure("Course is not open for enrollment.")

        existing = self.uow.enrollments.get_for_student(student_id=student.id, course_id=course.id)
        if existing is not None and existing.is_active:
            return Result.conflict("Student is already enrolled in this course.")
        if self._course_is_full(course):
            return Result.failure("Course has reached its maximum number of students.")

        if existing is not None:
            existing.reactivate()
            enrollment = existing
        else:
            enrollment = Enrollment.create(student_id=student.id, course_id=course.id)
            enrollment.course = course
            self.uow.enrollments.add(enrollment)

        logger.info("student_enrolled", student_id=str(student.id), course_id=str(course.id))
        return Result.success(EnrollmentResponse.from_entity(enrollment))


@handles(UpdateEnrollmentProgressCommand)
class UpdateEnrollmentProgressHandler(EnrollmentHandler):
    def handle(self, request: UpdateEnrollmentProgressCommand) -> Result[EnrollmentResponse]:
        enrollment = self._get_enrollment(request.enrollment_id)
        if enrollment is None:
            return self._missing(request.enrollment_id)
        enrollment.update_progress(request.progress_percentage)
        enrollment.record_access()
        return Result.success(EnrollmentResponse.from_entity(enrollment))


@handles(CompleteEnrollmentCommand)
class CompleteEnrollmentHandler(EnrollmentHandler):
    def handle(self, request: CompleteEnrollmentCommand) -> Result[EnrollmentResponse]:
        enrollment = self._get_enrollment(request.enrollment_id)
        if enrollment is None:
            return self._missing(request.enrollment_id)
        enrollment.complete()
        return Result.success(EnrollmentResponse.from_entity(enrollment))


@handles(DeactivateEnrollmentCommand)
class DeactivateEnrollmentHandler(EnrollmentHandler):
    def handle(self, request: DeactivateEnrollmentCommand) -> Result[EnrollmentResponse]:
        enrollment = self._get_enrollment(request.enrollment_id)
        if enrollment is None:
            return self._missing(request.enrollment_id)
        enrollment.deactivate()
        return Result.success(EnrollmentResponse.from_entity(enrollment))


@handles(ReactivateEnrollmentCommand)
class ReactivateEnrollmentHandler(EnrollmentHandler):
    def handle(self, request: ReactivateEnrollmentCommand) -> Result[EnrollmentResponse]:
        enrollment = self._get_enrollment(request.enrollment_id)
        if enrollment is None:
            return self._missing(request.enrollment_id)
        if not enrollment.is_active and self._course_is_full(enrollment.course):
            return Result.failure("Course has reached its maximum number of students.")
        enrollment.reactivate()
        return Result.success(EnrollmentResponse.from_entity(enrollment))


@handles(GetEnrollmentByIdQuery)
class GetEnrollmentByIdHandler(Handler):
    def handle(self, request: GetEnrollmentByIdQuery) -> Optional[EnrollmentResponse]:
        enrollment = self.uow.enrollments.get_by_id(request.enrollment_id)
        return EnrollmentResponse.from_entity(enrollment) if enrollment is not None else None


@handles(GetEnrollmentsByUserQuery)
class GetEnrollmentsByUserHandler(Handler):
    def handle(self, request: GetEnrollmentsByUserQuery) -> List[EnrollmentResponse]:
        enrollments = self.uow.enrollments.list_by_user(request.student_id, active_only=request.active_only)
        return [EnrollmentResponse.from_entity(enrollment) for enrollment in enrollments]


@handles(GetEnrollmentsByCourseQuery)
class GetEnrollmentsByCourseHandler(Handler):
    def handle(self, request: GetEnrollmentsByCourseQuery) -> List[EnrollmentResponse]:
        enrollments = self.uow.enrollments.list_by_course(request.course_id, active_only=request.active_only)
        return [EnrollmentResponse.from_entity(enrollment) for enrollment in enrollments]
