# medicaledu/repositories/ratings.py

from __future__ import annotations

from typing import Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from medicaledu.core.domain.entities import CourseRating, InstructorRating


class RatingsRepository:
    """
    Course and instructor ratings.

    Aggregates (average, count) are computed by the database over public
    ratings only.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    # ------------------------------------------------------------------
    # Course ratings
    # ------------------------------------------------------------------

    def get_course_rating(self, *, course_id: UUID, student_id: UUID) -> Optional[CourseRating]:
        stmt = select(CourseRating).where(
            CourseRating.course_id == course_id,
            CourseRating.student_id == student_id,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_course_ratings(self, course_id: UUID) -> Sequence[CourseRating]:
        stmt = (
            select(CourseRating)
            .where(CourseRating.course_id == course_id, CourseRating.is_public.is_(True))
            .order_by(CourseRating.created_at.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def course_summary(self, course_id: UUID) -> Tuple[Optional[float], int]:
        stmt = select(func.avg(CourseRating.rating), func.count(CourseRating.id)).where(
            CourseRating.course_id == course_id, CourseRating.is_public.is_(True)
        )
        average, count = self.session.execute(stmt).one()
        return (float(average) if average is not None else None), count

    # ------------------------------------------------------------------
    # Instructor ratings
    # ------------------------------------------------------------------

    def get_instructor_rating(self, *, booking_id: UUID, student_id: UUID) -> Optional[InstructorRating]:
        stmt = select(InstructorRating).where(
            InstructorRating.booking_id == booking_id,
            InstructorRating.student_id == student_id,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_instructor_ratings(self, instructor_id: UUID) -> Sequence[InstructorRating]:
        stmt = (
            select(InstructorRating)
            .where(InstructorRating.instructor_id == instructor_id, InstructorRating.is_public.is_(True))
            .order_by(InstructorRating.created_at.desc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def instructor_summary(self, instructor_id: UUID) -> Tuple[Optional[float], int]:
        stmt = select(func.avg(InstructorRating.rating), func.count(InstructorRating.id)).where(
            InstructorRating.instructor_id == instructor_id, InstructorRating.is_public.is_(True)
        )
        average, count = self.session.execute(stmt).one()
        return (float(average) if average is not None else None), count

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def add(self, rating):
        self.session.add(rating)
        return rating
