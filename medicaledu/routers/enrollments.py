# medicaledu/routers/enrollments.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

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
from medicaledu.core.application.mediator import Mediator
from medicaledu.routers.dependencies import found, get_mediator, unwrap
from medicaledu.schemas.enrollments import ProgressBody

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Enroll a student in a course")
async def enroll(command: EnrollInCourseCommand, mediator: Mediator = Depends(get_mediator)) -> EnrollmentResponse:
    return unwrap(await mediator.send(command))


@router.get("/users/{student_id}", summary="A student's enrollments")
async def list_for_student(
    student_id: UUID,
    active_only: bool = Query(False, alias="activeOnly"),
    mediator: Mediator = Depends(get_mediator),
) -> List[EnrollmentResponse]:
    return await mediator.send(GetEnrollmentsByUserQuery(student_id=student_id, active_only=active_only))


@router.get("/courses/{course_id}", summary="A course's enrollments")
async def list_for_course(
    course_id: UUID,
    active_only: bool = Query(False, alias="activeOnly"),
    mediator: Mediator = Depends(get_mediator),
) -> List[EnrollmentResponse]:
    return await mediator.send(GetEnrollmentsByCourseQuery(course_id=course_id, active_only=active_only))


@router.get("/{enrollment_id}", summary="Get an enrollment")
async def get_enrollment(enrollment_id: UUID, mediator: Mediator = Depends(get_mediator)) -> EnrollmentResponse:
    return found(await mediator.send(GetEnrollmentByIdQuery(enrollment_id=enrollment_id)), "Enrollment", enrollment_id)


@router.put("/{enrollment_id}/progress", summary="Record course progress")
async def update_progress(
    enrollment_id: UUID, payload: ProgressBody, mediator: Mediator = Depends(get_mediator)
) -> EnrollmentResponse:
    return unwrap(
        await mediator.send(
            UpdateEnrollmentProgressCommand(
                enrollment_id=enrollment_id, progress_percentage=payload.progress_percentage
            )
        )
    )


@router.post("/{enrollment_id}/complete", summary="Complete an enrollment")
async def complete(enrollment_id: UUID, mediator: Mediator = Depends(get_mediator)) -> EnrollmentResponse:
    return unwrap(await mediator.send(CompleteEnrollmentCommand(enrollment_id=enrollment_id)))


@router.post("/{enrollment_id}/deactivate", summary="Withdraw from a course")
async def deactivate(enrollment_id: UUID, mediator: Mediator = Depends(get_mediator)) -> EnrollmentResponse:
    return unwrap(await mediator.send(DeactivateEnrollmentCommand(enrollment_id=enrollment_id)))


@router.post("/{enrollment_id}/reactivate", summary="Rejoin a course")
async def reactivate(enrollment_id: UUID, mediator: Mediator = Depends(get_mediator)) -> EnrollmentResponse:
    return unwrap(await mediator.send(ReactivateEnrollmentCommand(enrollment_id=enrollment_id)))
