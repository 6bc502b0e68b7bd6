# medicaledu/core/application/features/enrollments/models.py
from datetime import datetime
from typing import Optional
from uuid import UUID

from medicaledu.core.application.dto import ResponseModel
from medicaledu.core.domain.entities import Enrollment


class EnrollmentResponse(ResponseModel):
    id: UUID
    student_id: UUID
    course_id: UUID
    course_title: Optional[str] = None
    enrolled_at: datetime
    is_active: bool
    is_completed: bool
    progress_percentage: int
    completed_at: Optional[datetime] = None
    last_accessed_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, enrollment: Enrollment) -> "EnrollmentResponse":
        return cls(
            id=enrollment.id,
            student_id=enrollment.student_id,
            course_id=enrollment.course_id,
            course_title=enrollment.course.title if enrollment.course is not None else None,
            enrolled_at=enrollment.enrolled_at,
            is_active=enrollment.is_active,
            is_completed=enrollment.is_completed,
            progress_percentage=enrollment.progress_percentage,
            completed_at=enrollment.completed_at,
            last_accessed_at=enrollment.last_accessed_at,
        )
