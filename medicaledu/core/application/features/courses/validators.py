# medicaledu/core/application/features/courses/validators.py
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from medicaledu.core.application.features.courses.requests import (
    CreateCourseCommand,
    GetAllCoursesQuery,
    ReorderCourseMaterialsCommand,
    UpdateCourseCommand,
)
from medicaledu.core.application.validation import PageRules, RequestRules, url_or_none, validates


class MaterialRules(RequestRules):
    title: str = Field(..., min_length=1, max_length=200)
    file_url: str
    content_type: str = Field(..., min_length=1, max_length=100)
    file_size_bytes: int = Field(0, ge=0)
    order_index: int = Field(0, ge=0)

    @field_validator("file_url")
    @classmethod
    def check_url(cls, value):
        return url_or_none(value)


@validates(CreateCourseCommand)
class CreateCourseRules(RequestRules):
    instructor_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    short_description: Optional[str] = Field(None, max_length=500)
    price: Decimal = Field(..., ge=0)
    currency: str = Field(..., min_length=3, max_length=3)
    duration_minutes: int = Field(..., gt=0, le=1440)
    max_students: int = Field(..., gt=0, le=1000)
    category: str = Field(..., min_length=1, max_length=100)
    thumbnail_url: Optional[str] = None
    video_intro_url: Optional[str] = None
    materials: List[MaterialRules] = []

    @field_validator("thumbnail_url", "video_intro_url")
    @classmethod
    def check_urls(cls, value):
        return url_or_none(value)


@validates(UpdateCourseCommand)
class UpdateCourseRules(RequestRules):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    short_description: Optional[str] = Field(None, max_length=500)
    price: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    duration_minutes: Optional[int] = Field(None, gt=0, le=1440)
    max_students: Optional[int] = Field(None, gt=0, le=1000)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    thumbnail_url: Optional[str] = None
    video_intro_url: Optional[str] = None
    materials: Optional[List[MaterialRules]] = None

    @field_validator("thumbnail_url", "video_intro_url")
    @classmethod
    def check_urls(cls, value):
        return url_or_none(value)


@validates(ReorderCourseMaterialsCommand)
def validate_reorder_materials(request: ReorderCourseMaterialsCommand) -> Iterable[str]:
    if not request.material_ids:
        yield "Material IDs are required."
    elif len(set(request.material_ids)) != len(request.material_ids):
        yield "Material IDs must be unique."


@validates(GetAllCoursesQuery)
class GetAllCoursesRules(PageRules):
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    min_price: Optional[Decimal] = Field(None, ge=0)
    max_price: Optional[Decimal] = Field(None, ge=0)


@validates(GetAllCoursesQuery)
def validate_catalogue_ranges(request: GetAllCoursesQuery) -> Iterable[str]:
    if request.min_price is not None and request.max_price is not None and request.min_price > request.max_price:
        yield "Minimum price cannot be greater than maximum price."
    if (
        request.min_duration_minutes is not None
        and request.max_duration_minutes is not None
        and request.min_duration_minutes > request.max_duration_minutes
    ):
        yield "Minimum duration cannot be greater than maximum duration."
