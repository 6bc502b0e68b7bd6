# medicaledu/schemas/ratings.py
from typing import Optional
from uuid import UUID

from medicaledu.schemas.base import RequestBody


class CourseRatingBody(RequestBody):
    student_id: UUID
    rating: int
    review: Optional[str] = None
    is_public: bool = True
