# medicaledu/schemas/courses.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from medicaledu.core.application.features.courses.requests import CourseMaterialInput
from medicaledu.core.domain.enums import DifficultyLevel
from medicaledu.schemas.base import RequestBody


class CourseUpdateBody(RequestBody):
    """Every field is optional; ``None`` leaves the stored value unchanged."""

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


class PublishCourseBody(RequestBody):
    published_at: Optional[datetime] = None


class ReorderMaterialsBody(RequestBody):
    material_ids: List[UUID] = Field(default_factory=list)
