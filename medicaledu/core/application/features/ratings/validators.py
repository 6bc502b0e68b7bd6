# medicaledu/core/application/features/ratings/validators.py
from typing import Optional

from pydantic import Field

from medicaledu.core.application.features.ratings.requests import RateCourseCommand, RateInstructorCommand
from medicaledu.core.application.validation import RequestRules, validates


@validates(RateCourseCommand)
@validates(RateInstructorCommand)
class RatingRules(RequestRules):
    rating: int = Field(..., ge=1, le=5)
    review: Optional[str] = Field(None, max_length=2000)
