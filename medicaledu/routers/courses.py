# medicaledu/routers/courses.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from medicaledu.core.application.features.courses.models import CourseListResponse, CourseResponse, CreateCourseResponse
from medicaledu.core.application.features.courses.requests import (
    ActivateCourseCommand,
    CreateCourseCommand,
    DeactivateCourseCommand,
    GetAllCoursesQuery,
    GetCourseByIdQuery,
    PublishCourseCommand,
    ReorderCourseMaterialsCommand,
    UnpublishCourseCommand,
    UpdateCourseCommand,
)
from medicaledu.core.application.mediator import Mediator
from medicaledu.routers.dependencies import found, get_mediator, query_from_params
from medicaledu.schemas.courses import CourseUpdateBody, PublishCourseBody, ReorderMaterialsBody

router = APIRouter(prefix="/courses", tags=["courses"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a course")
async def create_course(command: CreateCourseCommand, mediator: Mediator = Depends(get_mediator)) -> CreateCourseResponse:
    return await mediator.send(command)


@router.get(
    "",
    summary="Search the course catalogue",
    description=(
        "Filters, ranges and per-column sort directions are passed as query "
        "parameters, e.g. `?isPublished=true&category=Anatomy&priceSortDirection=asc`."
    ),
)
async def list_courses(request: Request, mediator: Mediator = Depends(get_mediator)) -> CourseListResponse:
    return await mediator.send(query_from_params(GetAllCoursesQuery, request))


@router.get("/{course_id}", summary="Get a course")
async def get_course(course_id: UUID, mediator: Mediator = Depends(get_mediator)) -> CourseResponse:
    return found(await mediator.send(GetCourseByIdQuery(course_id=course_id)), "Course", course_id)


@router.put("/{course_id}", summary="Update a course")
async def update_course(
    course_id: UUID, payload: CourseUpdateBody, mediator: Mediator = Depends(get_mediator)
) -> CourseResponse:
    return await mediator.send(UpdateCourseCommand(course_id=course_id, **payload.model_dump()))


@router.post("/{course_id}/publish", summary="Publish a course")
async def publish_course(
    course_id: UUID, payload: Optional[PublishCourseBody] = None, mediator: Mediator = Depends(get_mediator)
) -> CourseResponse:
    published_at = payload.published_at if payload is not None else None
    return await mediator.send(PublishCourseCommand(course_id=course_id, published_at=published_at))


@router.post("/{course_id}/unpublish", summary="Withdraw a course from the catalogue")
async def unpublish_course(course_id: UUID, mediator: Mediator = Depends(get_mediator)) -> CourseResponse:
    return await mediator.send(UnpublishCourseCommand(course_id=course_id))


@router.post("/{course_id}/activate", summary="Restore a deactivated course")
async def activate_course(course_id: UUID, mediator: Mediator = Depends(get_mediator)) -> CourseResponse:
    return await mediator.send(ActivateCourseCommand(course_id=course_id))


@router.post("/{course_id}/deactivate", summary="Soft-delete a course")
async def deactivate_course(course_id: UUID, mediator: Mediator = Depends(get_mediator)) -> CourseResponse:
    return await mediator.send(DeactivateCourseCommand(course_id=course_id))


@router.put("/{course_id}/materials/order", summary="Reorder course materials")
async def reorder_materials(
    course_id: UUID, payload: ReorderMaterialsBody, mediator: Mediator = Depends(get_mediator)
) -> CourseResponse:
    return await mediator.send(ReorderCourseMaterialsCommand(course_id=course_id, material_ids=payload.material_ids))
