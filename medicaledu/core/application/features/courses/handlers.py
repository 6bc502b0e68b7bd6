# medicaledu/core/application/features/courses/handlers.py
from __future__ import annotations

import math
from typing import Iterable, Optional

import structlog

from medicaledu.core.application.features.courses.models import (
    CourseListResponse,
    CourseResponse,
    CreateCourseResponse,
)
from medicaledu.core.application.features.courses.requests import (
    ActivateCourseCommand,
    CourseMaterialInput,
    CreateCourseCommand,
    DeactivateCourseCommand,
    GetAllCoursesQuery,
    GetCourseByIdQuery,
    PublishCourseCommand,
    ReorderCourseMaterialsCommand,
    UnpublishCourseCommand,
    UpdateCourseCommand,
)
from medicaledu.core.application.mediator import Handler, handles
from medicaledu.core.domain.entities import Course, CourseMaterial, User
from medicaledu.core.domain.enums import SortDirection
from medicaledu.core.domain.exceptions import EntityNotFoundError
from medicaledu.repositories.courses import CourseSearchCriteria

logger = structlog.get_logger()


def _build_materials(materials: Iterable[CourseMaterialInput]) -> Iterable[CourseMaterial]:
    for item in sorted(materials, key=lambda m: m.order_index):
        yield CourseMaterial.create(
            title=item.title,
            description=item.description,
            file_url=item.file_url,
            file_name=item.file_name or item.file_url.rstrip("/").rsplit("/", 1)[-1],
            content_type=item.content_type,
            file_size_bytes=item.file_size_bytes,
            sort_order=item.order_index,
            is_free=item.is_free,
            is_required=item.is_required,
        )


class CourseHandler(Handler):
    def _get_course(self, course_id) -> Course:
        course = self.uow.courses.get_by_id(course_id)
        if course is None:
            logger.warning("course_not_found", course_id=str(course_id))
            raise EntityNotFoundError("Course", course_id)
        return course

    def _get_instructor(self, instructor_id) -> User:
        instructor = self.uow.users.get_by_id(instructor_id)
        if instructor is None:
            logger.warning("instructor_not_found", instructor_id=str(instructor_id))
            raise EntityNotFoundError("Instructor", instructor_id)
        return instructor


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@handles(CreateCourseCommand)
class CreateCourseHandler(CourseHandler):
    def handle(self, request: CreateCourseCommand) -> CreateCourseResponse:
        logger.info("creating_course", title=request.title)
        instructor = self._get_instructor(request.instructor_id)

        course = Course.create(
            instructor_id=instructor.id,
            title=request.title,
            description=request.description,
            short_description=request.short_description,
            content=request.content,
            duration_minutes=request.duration_minutes,
            max_students=request.max_students,
            category=request.category,
            difficulty_level=request.difficulty_level,
            tags=request.tags,
            thumbnail_url=request.thumbnail_url,
            video_intro_url=request.video_intro_url,
            price=request.price,
            currency=request.currency,
            created_by=str(instructor.id),
        )
        course.instructor = instructor
        for material in _build_materials(request.materials):
            course.add_material(material)
        if request.is_published:
            course.publish(request.published_at)

        self.uow.courses.add(course)
        logger.info("course_created", course_id=str(course.id))

        return CreateCourseResponse(
            course_id=course.id,
            title=course.title,
            description=course.description,
            price=float(course.price),
            currency=course.currency,
            instructor_id=course.instructor_id,
            is_published=course.is_published,
            material_count=len(course.materials),
            created_at=course.created_at,
        )


@handles(UpdateCourseCommand)
class UpdateCourseHandler(CourseHandler):
    def handle(self, request: UpdateCourseCommand) -> CourseResponse:
        logger.info("updating_course", course_id=str(request.course_id))
        course = self._get_course(request.course_id)

        course.update_details(
            title=request.title or None,
            description=request.description or None,
            short_description=request.short_description,
            content=request.content or None,
            duration_minutes=request.duration_minutes,
            max_students=request.max_students,
            category=request.category or None,
            difficulty_level=request.difficulty_level,
            tags=request.tags or None,
            video_intro_url=request.video_intro_url,
        )
        if request.price is not None:
            course.update_price(request.price, request.currency or None)
        if request.thumbnail_url:
            course.set_thumbnail(request.thumbnail_url)

        if request.instructor_id is not None and request.instructor_id != course.instructor_id:
            instructor = self._get_instructor(request.instructor_id)
            course.change_instructor(instructor.id)
            course.instructor = instructor

        # Materials go first so that publishing sees the new set.
        if request.materials is not None:
            course.clear_materials()
            for material in _build_materials(request.materials):
                course.add_material(material)

        if request.is_published is not None and request.is_published != course.is_published:
            if request.is_published:
                course.publish(request.published_at)
            else:
                course.unpublish()

        logger.info("course_updated", course_id=str(course.id))
        return CourseResponse.from_entity(course)


@handles(PublishCourseCommand)
class PublishCourseHandler(CourseHandler):
    def handle(self, request: PublishCourseCommand) -> CourseResponse:
        course = self._get_course(request.course_id)
        course.publish(request.published_at)
        return CourseResponse.from_entity(course)


@handles(UnpublishCourseCommand)
class UnpublishCourseHandler(CourseHandler):
    def handle(self, request: UnpublishCourseCommand) -> CourseResponse:
        course = self._get_course(request.course_id)
        course.unpublish()
        return CourseResponse.from_entity(course)


@handles(ActivateCourseCommand)
class ActivateCourseHandler(CourseHandler):
    def handle(self, request: ActivateCourseCommand) -> CourseResponse:
        course = self._get_course(request.course_id)
        course.activate()
        return CourseResponse.from_entity(course)


@handles(DeactivateCourseCommand)
class DeactivateCourseHandler(CourseHandler):
    def handle(self, request: DeactivateCourseCommand) -> CourseResponse:
        course = self._get_course(request.course_id)
        course.deactivate()
        return CourseResponse.from_entity(course)


@handles(ReorderCourseMaterialsCommand)
class ReorderCourseMaterialsHandler(CourseHandler):
    def handle(self, request: ReorderCourseMaterialsCommand) -> CourseResponse:
        course = self._get_course(request.course_id)
        course.reorder_materials(request.material_ids)
        return CourseResponse.from_entity(course)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


@handles(GetCourseByIdQuery)
class GetCourseByIdHandler(Handler):
    def handle(self, request: GetCourseByIdQuery) -> Optional[CourseResponse]:
        course = self.uow.courses.get_by_id(request.course_id)
        if course is None:
            logger.info("course_lookup_miss", course_id=str(request.course_id))
            return None
        return CourseResponse.from_entity(course)


_SORT_FIELDS = (
    ("title", "title_sort_direction"),
    ("price", "price_sort_direction"),
    ("created_at", "created_at_sort_direction"),
    ("published_at", "published_at_sort_direction"),
    ("updated_at", "updated_at_sort_direction"),
    ("duration", "duration_minutes_sort_direction"),
)


@handles(GetAllCoursesQuery)
class GetAllCoursesHandler(Handler):
    def handle(self, request: GetAllCoursesQuery) -> CourseListResponse:
        criteria = CourseSearchCriteria(
            is_published=request.is_published,
            is_active=request.is_active,
            instructor_id=request.instructor_id,
            title_contains=request.title,
            description_contains=request.description,
            category=request.category,
            tags_contains=request.tags,
            min_price=request.min_price,
            max_price=request.max_price,
            currency=request.currency,
            created_from=request.created_from,
            created_to=request.created_to,
            published_from=request.published_from,
            published_to=request.published_to,
            updated_from=request.updated_from,
            updated_to=request.updated_to,
            min_duration=request.min_duration_minutes,
            max_duration=request.max_duration_minutes,
            min_max_students=request.min_max_students,
            max_max_students=request.max_max_students,
            sort=[
                (column, SortDirection(getattr(request, attr)))
                for column, attr in _SORT_FIELDS
                if getattr(request, attr) is not None
            ],
            page=request.page,
            page_size=request.page_size,
        )
        courses, total = self.uow.courses.search(criteria)

        total_pages = math.ceil(total / request.page_size) if total else 0
        return CourseListResponse(
            total_count=total,
            page=request.page,
            page_size=request.page_size,
            total_pages=total_pages,
            has_next_page=request.page < total_pages - 1,
            has_previous_page=request.page > 0,
            courses=[CourseResponse.from_entity(course) for course in courses],
        )
