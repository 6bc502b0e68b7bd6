# medicaledu/repositories/enrollments.py

from __future__ import annotations

from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from medicaledu.core.domain.entities import Enrollment


class EnrollmentsRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    def get_by_id(self, enrollment_id: UUID) -> Optional[Enrollment]:
        return self.session.get(Enrollment, enrollment_id)

    def get_for_student(self, *, student_id: UUID, course_id: UUID) -> Optional[Enrollment]:
        stmt = select(Enrollment).where(
            Enrollment.student_id == student_id,
            Enrollment.course_id == course_id,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def count_active(self, course_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(Enrollment)
            .where(Enrollment.course_id == course_id, Enrollment.is_active.is_(True))
        )
        return self.session.execute(stmt).scalar_one()

    def list_by_user(self, student_id: UUID, *, active_only: bool = False) -> Sequence[Enrollment]:
        stmt = select(Enrollment).where(Enrollment.student_id == student_id)
        if active_only:
            stmt = stmt.where(Enrollment.is_active.is_(True))
        stmt = stmt.order_by(Enrollment.enrolled_at.desc())
        return list(self.session.execute(stmt).scalars().all())

    def list_by_course(self, course_id: UUID, *, active_only: bool = False) -> Sequence[Enrollment]:
        stmt = select(Enrollment).where(Enrollment.course_id == course_id)
        if active_only:
            stmt = stmt.where(Enrollment.is_active.is_(True))
        stmt = stmt.order_by(Enrollment.enrolled_at.desc())
        return list(self.session.execute(stmt).scalars().all())

    def add(self, enrollment: Enrollment) -> Enrollment:
        self.session.add(enrollment)
        return enrollment
