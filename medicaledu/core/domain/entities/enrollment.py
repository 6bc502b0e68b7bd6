# medicaledu/core/domain/entities/enrollment.py

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medicaledu.core.domain.entities.base import Base, EntityMixin, UTCDateTime, utcnow
from medicaledu.core.domain.exceptions import DomainValidationError, InvalidOperationError

if TYPE_CHECKING:
    from medicaledu.core.domain.entities.course import Course
    from medicaledu.core.domain.entities.user import User


def _check_progress(percent: int) -> None:
    if percent is None or percent < 0 or percent > 100:
        raise DomainValidationError("Progress percentage must be between 0 and 100.")


class Enrollment(EntityMixin, Base):
    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("student_id", "course_id", name="uq_enrollment_student_course"),)

    student_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    course_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("courses.id"), index=True, nullable=False)
    enrolled_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    progress_percentage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    last_accessed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    student: Mapped["User"] = relationship("User")
    course: Mapped["Course"] = relationship("Course", back_populates="enrollments")

    @classmethod
    def create(cls, *, student_id: uuid.UUID, course_id: uuid.UUID, created_by: Optional[str] = None) -> "Enrollment":
        if not student_id:
            raise DomainValidationError("Student ID is required.")
        if not course_id:
            raise DomainValidationError("Course ID is required.")
        now = utcnow()
        return cls(
            id=uuid.uuid4(),
            student_id=student_id,
            course_id=course_id,
            enrolled_at=now,
            is_active=True,
            progress_percentage=0,
            created_at=now,
            created_by=created_by,
        )

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def complete(self, modified_by: Optional[str] = None) -> None:
        if self.is_completed:
            raise InvalidOperationError("Enrollment is already completed.")
        self.completed_at = utcnow()
        self.progress_percentage = 100
        self.touch(modified_by)

    def update_progress(self, percent: int, modified_by: Optional[str] = None) -> None:
        _check_progress(percent)
        if self.is_completed:
            raise InvalidOperationError("Cannot update progress on completed enrollment.")
        self.progress_percentage = percent
        self.touch(modified_by)

    def deactivate(self, modified_by: Optional[str] = None) -> None:
        if not self.is_active:
            raise InvalidOperationError("Enrollment is already inactive.")
        self.is_active = False
        self.touch(modified_by)

    def reactivate(self, modified_by: Optional[str] = None) -> None:
        if self.is_active:
            raise InvalidOperationError("Enrollment is already active.")
        self.is_active = True
        self.touch(modified_by)

    def record_access(self, modified_by: Optional[str] = None) -> None:
        self.last_accessed_at = utcnow()
        self.touch(modified_by)
