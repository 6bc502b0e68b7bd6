# medicaledu/core/application/features/courses/models.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from medicaledu.core.application.dto import ResponseModel, as_float
from medicaledu.core.domain.entities import Course, CourseMaterial


class CourseMaterialResponse(ResponseModel):
    id: UUID
    title: str
    description: Optional[str] = None
    file_url: str
    file_name: str
    content_type: str
    file_size_bytes: int
    sort_order: int
    is_free: bool
    is_required: bool

    @classmethod
    def from_entity(cls, material: CourseMaterial) -> "CourseMaterialResponse":
        return cls.model_validate(material)


class CreateCourseResponse(ResponseModel):
    course_id: UUID
    title: str
    description: Optional[str] = None
    price: float
    currency: str
    instructor_id: UUID
    is_published: bool
    material_count: int
    created_at: datetime


class CourseResponse(ResponseModel):
    id: UUID
    title: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    content: Optional[str] = None
    is_published: bool
    is_active: bool
    price: float
    currency: str
    thumbnail_url: Optional[str] = None
    video_intro_url: Optional[str] = None
    duration_minutes: Optional[int] = None
    max_students: Optional[int] = None
    category: Optional[str] = None
    difficulty_level: Optional[str] = None
    tags: List[str] = []
    created_at: datetime
    updated_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    instructor_id: UUID
    instructor_name: str = ""
    enrollment_count: int = 0
    average_rating: Optional[float] = None
    rating_count: int = 0
    material_count: int = 0
    availability_slot_count: int = 0
    materials: List[CourseMaterialResponse] = []

    @classmethod
    def from_entity(cls, course: Course) -> "CourseResponse":
        public_ratings = [r.rating for r in course.ratings if r.is_public]
        materials = sorted(course.materials, key=lambda m: m.sort_order)
        return cls(
            id=course.id,
            title=course.title,
            description=course.description,
            short_description=course.short_description,
            content=course.content,
            is_published=course.is_published,
            is_active=course.is_active,
            price=as_float(course.price),
            currency=course.currency,
            thumbnail_url=course.thumbnail_url,
            video_intro_url=course.video_intro_url,
            duration_minutes=course.duration_minutes,
            max_students=course.max_students,
            category=course.category,
            difficulty_level=course.difficulty_level.value if course.difficulty_level else None,
            tags=course.tag_list,
            created_at=course.created_at,
            updated_at=course.updated_at,
            published_at=course.published_at,
            instructor_id=course.instructor_id,
            instructor_name=course.instructor.name if course.instructor is not None else "",
            enrollment_count=course.enrollment_count(),
            average_rating=(
                round(sum(public_ratings) / len(public_ratings), 2) if public_ratings else None
            ),
            rating_count=len(public_ratings),
            material_count=len(materials),
            availability_slot_count=len(course.availability_slots),
            materials=[CourseMaterialResponse.from_entity(m) for m in materials],
        )


class CourseListResponse(ResponseModel):
    total_count: int
    page: int
    page_size: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool
    courses: List[CourseResponse]
