# medicaledu/core/application/features/courses/requests.py
from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from typing import ClassVar, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from medicaledu.core.application.caching import CachePrefixes, cache_invalidation
from medicaledu.core.application.features.courses.models import (
    CourseListResponse,
    CourseResponse,
    CreateCourseResponse,
)
from medicaledu.core.application.requests import CacheableRequest, Command
from medicaledu.core.domain.enums import DifficultyLevel, SortDirection

COURSE_LISTINGS = (
    CachePrefixes.GET_ALL_COURSES,
    CachePrefixes.GET_COURSES_BY_INSTRUCTOR,
    CachePrefixes.GET_COURSES_BY_CATEGORY,
)
COURSE_DATA = (CachePrefixes.GET_COURSE_BY_ID,) + COURSE_LISTINGS


class CourseMaterialInput(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    title: str
    file_url: str
    content_type: str
    file_name: Optional[str] = None
    description: Optional[str] = None
    file_size_bytes: int = 0
    order_index: int = 0
    is_free: bool = False
    is_required: bool = True


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@cache_invalidation(
    COURSE_LISTINGS,
    reason="New course affects course listings, the instructor's courses and category listings",
)
class CreateCourseCommand(Command):
    response_type: ClassVar = CreateCourseResponse

    instructor_id: Optional[UUID] = None
    title: str = ""
    description: str = ""
    short_description: Optional[str] = None
    content: Optional[str] = None
    category: str = ""
    difficulty_level: DifficultyLevel = DifficultyLevel.BEGINNER
    tags: Optional[str] = None
    price: Decimal = Decimal("0")
    currency: str = "USD"
    duration_minutes: int = 0
    max_students: int = 0
    thumbnail_url: Optional[str] = None
    video_intro_url: Optional[str] = None
    is_published: bool = False
    published_at: Optional[datetime] = None
    materials: List[CourseMaterialInput] = Field(default_factory=list)


@cache_invalidation(
    COURSE_DATA,
    reason="Course update affects listings, the course itself, the instructor's courses and category listings",
)
class UpdateCourseCommand(Command):
    response_type: ClassVar = CourseResponse

    course_id: UUID
    title: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    difficulty_level: Optional[DifficultyLevel] = None
    tags: Optional[str] = None
    price: Optional[Decimal] = None
    currency: Optional[str] = None
    duration_minutes: Optional[int] = None
    max_students: Optional[int] = None
    thumbnail_url: Optional[str] = None
    video_intro_url: Optional[str] = None
    instructor_id: Optional[UUID] = None
    is_published: Optional[bool] = None
    published_at: Optional[datetime] = None
    materials: Optional[List[CourseMaterialInput]] = None


@cache_invalidation(COURSE_DATA, reason="Publication changes what the catalogue shows")
class PublishCourseCommand(Command):
    response_type: ClassVar = CourseResponse

    course_id: UUID
    published_at: Optional[datetime] = None


@cache_invalidation(COURSE_DATA, reason="Publication changes what the catalogue shows")
class UnpublishCourseCommand(Command):
    response_type: ClassVar = CourseResponse

    course_id: UUID


@cache_invalidation(COURSE_DATA, reason="Activation changes what the catalogue shows")
class ActivateCourseCommand(Command):
    response_type: ClassVar = CourseResponse

    course_id: UUID


@cache_invalidation(COURSE_DATA, reason="Deactivation removes the course from active listings")
class DeactivateCourseCommand(Command):
    response_type: ClassVar = CourseResponse

    course_id: UUID


@cache_invalidation(COURSE_DATA, reason="Material order is part of the course data")
class ReorderCourseMaterialsCommand(Command):
    response_type: ClassVar = CourseResponse

    course_id: UUID
    material_ids: List[UUID] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class GetCourseByIdQuery(CacheableRequest):
    response_type: ClassVar = Optional[CourseResponse]
    cache_duration: ClassVar[timedelta] = timedelta(minutes=30)
    cache_prefix: ClassVar[str] = CachePrefixes.GET_COURSE_BY_ID

    course_id: UUID

    def get_cache_key(self) -> str:
        return f"{CachePrefixes.GET_COURSE_BY_ID}_{self.course_id}"


class GetAllCoursesQuery(CacheableRequest):
    """
    One page of the course catalogue.

    Sort directions are applied in field order: title, price, created_at,
    published_at, updated_at, duration. Without any, newest first.
    """

    response_type: ClassVar = CourseListResponse
    cache_duration: ClassVar[timedelta] = timedelta(minutes=10)
    cache_prefix: ClassVar[str] = CachePrefixes.GET_ALL_COURSES

    page: int = 0
    page_size: int = 25

    is_published: Optional[bool] = None
    is_active: Optional[bool] = None
    instructor_id: Optional[UUID] = None
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[str] = None

    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    currency: Optional[str] = None

    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None
    published_from: Optional[datetime] = None
    published_to: Optional[datetime] = None
    updated_from: Optional[datetime] = None
    updated_to: Optional[datetime] = None

    min_duration_minutes: Optional[int] = None
    max_duration_minutes: Optional[int] = None
    min_max_students: Optional[int] = None
    max_max_students: Optional[int] = None

    title_sort_direction: Optional[SortDirection] = None
    price_sort_direction: Optional[SortDirection] = None
    created_at_sort_direction: Optional[SortDirection] = None
    published_at_sort_direction: Optional[SortDirection] = None
    updated_at_sort_direction: Optional[SortDirection] = None
    duration_minutes_sort_direction: Optional[SortDirection] = None

    def get_cache_key(self) -> str:
        # Narrow listings get their own prefix so they can be dropped separately.
        if self.instructor_id is not None:
            return self.hashed_key(CachePrefixes.GET_COURSES_BY_INSTRUCTOR)
        if self.category:
            return self.hashed_key(CachePrefixes.GET_COURSES_BY_CATEGORY)
        return self.hashed_key(CachePrefixes.GET_ALL_COURSES)
