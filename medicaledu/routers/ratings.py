# medicaledu/routers/ratings.py
from uuid import UUID

from fastapi import APIRouter, Depends, status

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
from medicaledu.core.application.mediator import Mediator
from medicaledu.routers.dependencies import get_mediator, unwrap
from medicaledu.schemas.ratings import CourseRatingBody

router = APIRouter(prefix="/ratings", tags=["ratings"])


@router.post("/courses/{course_id}", status_code=status.HTTP_201_CREATED, summary="Rate a course")
async def rate_course(
    course_id: UUID, payload: CourseRatingBody, mediator: Mediator = Depends(get_mediator)
) -> CourseRatingResponse:
    return unwrap(await mediator.send(RateCourseCommand(course_id=course_id, **payload.model_dump())))


@router.get("/courses/{course_id}", summary="Public ratings of a course")
async def course_ratings(course_id: UUID, mediator: Mediator = Depends(get_mediator)) -> CourseRatingsResponse:
    return await mediator.send(GetCourseRatingsQuery(course_id=course_id))


@router.post("/instructors", status_code=status.HTTP_201_CREATED, summary="Rate the instructor of a held session")
async def rate_instructor(
    command: RateInstructorCommand, mediator: Mediator = Depends(get_mediator)
) -> InstructorRatingResponse:
    return unwrap(await mediator.send(command))


@router.get("/instructors/{instructor_id}", summary="Public ratings of an instructor")
async def instructor_ratings(
    instructor_id: UUID, mediator: Mediator = Depends(get_mediator)
) -> InstructorRatingsResponse:
    return await mediator.send(GetInstructorRatingsQuery(instructor_id=instructor_id))
