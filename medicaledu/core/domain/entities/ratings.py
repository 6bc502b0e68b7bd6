# medicaledu/core/domain/entities/ratings.py

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medicaledu.core.domain.entities.base import Base, EntityMixin, utcnow
from medicaledu.core.domain.exceptions import DomainValidationError

if TYPE_CHECKING:
    from medicaledu.core.domain.entities.course import Course


def _check_rating(rating: int) -> None:
    if rating is None or rating < 1 or rating > 5:
        raise DomainValidationError("Rating must be between 1 and 5.")


class RatingMixin(EntityMixin):
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    review: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def update_rating(self, rating: int, modified_by: Optional[str] = None) -> None:
        _check_rating(rating)
        self.rating = rating
        self.touch(modified_by)

    def update_review(self, review: Optional[str], modified_by: Optional[str] = None) -> None:
        self.review = review
        self.touch(modified_by)

    def set_visibility(self, is_public: bool, modified_by: Optional[str] = None) -> None:
        self.is_public = is_public
        self.touch(modified_by)


class CourseRating(RatingMixin, Base):
    __tablename__ = "course_ratings"
    __table_args__ = (UniqueConstraint("course_id", "student_id", name="uq_course_rating_student"),)

    course_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("courses.id"), index=True, nullable=False)
    student_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)

    course: Mapped["Course"] = relationship("Course", back_populates="ratings")

    @classmethod
    def create(
        cls,
        *,
        course_id: uuid.UUID,
        student_id: uuid.UUID,
        rating: int,
        review: Optional[str] = None,
        is_public: bool = True,
    ) -> "CourseRating":
        if not course_id:
            raise DomainValidationError("Course ID is required.")
        if not student_id:
            raise DomainValidationError("Student ID is required.")
        _check_rating(rating)
        return cls(
            id=uuid.uuid4(),
            course_id=course_id,
            student_id=student_id,
            rating=rating,
            review=review,
            is_public=is_public,
            created_at=utcnow(),
        )


class InstructorRating(RatingMixin, Base):
    __tablename__ = "instructor_ratings"
    __table_args__ = (UniqueConstraint("booking_id", "student_id", name="uq_instructor_rating_booking"),)

    instructor_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    student_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    booking_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("bookings.id"), nullable=False)

    @classmethod
    def create(
        cls,
        *,
        instructor_id: uuid.UUID,
        student_id: uuid.UUID,
        booking_id: uuid.UUID,
        rating: int,
        review: Optional[str] = None,
        is_public: bool = True,
    ) -> "InstructorRating":
        if not instructor_id:
            raise DomainValidationError("Instructor ID is required.")
        if not student_id:
            raise DomainValidationError("Student ID is required.")
        if not booking_id:
            raise DomainValidationError("Booking ID is required.")
        _check_rating(rating)
        return cls(
            id=uuid.uuid4(),
            instructor_id=instructor_id,
            student_id=student_id,
            booking_id=booking_id,
            rating=rating,
            review=review,
            is_public=is_public,
            created_at=utcnow(),
        )
