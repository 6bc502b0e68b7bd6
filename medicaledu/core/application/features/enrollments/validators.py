# medicaledu/core/application/features/enrollments/validators.py
from pydantic import Field

from medicaledu.core.application.features.enrollments.requests import UpdateEnrollmentProgressCommand
from medicaledu.core.application.validation import RequestRules, validates


@validates(UpdateEnrollmentProgressCommand)
class UpdateProgressRules(RequestRules):
    progress_percentage: int = Field(..., ge=0, le=100)
