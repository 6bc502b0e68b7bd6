# medicaledu/core/application/features/ratings/models.py
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from medicaledu.core.application.dto import ResponseModel
from medicaledu.core.domain.entities import CourseRating, InstructorRating


class CourseRatingResponse(ResponseModel):
    id: UUID
    course_id: UUID
    student_id: UUID
    rating: int
    review: Optional[str] = None
    is_public: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, rating: CourseRating) -> "CourseRatingResponse":
        return cls.model_validate(rating)


class InstructorRatingResponse(ResponseModel):
    id: UUID
    instructor_id: UUID
    student_id: UUID
    booking_id: UUID
    rating: int
    review: Optional[str] = None
    is_public: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, rating: InstructorRating) -> "InstructorRatingResponse":
        return cls.model_validate(rating)


class CourseRatingsResponse(ResponseModel):
    course_id: UUID
    average_rating: Optional[float] = None
    rating_count: int
    ratings: List[CourseRatingResponse]


class InstructorRatingsResponse(ResponseModel):
    instructor_id: UUID
    average_rating: Optional[float] = None
    rating_count: int
    ratings: List[InstructorRatingResponse]
