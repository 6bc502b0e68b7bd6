# medicaledu/repositories/courses.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session, selectinload

from medicaledu.core.domain.entities import Course
from medicaledu.core.domain.enums import SortDirection


@dataclass
class CourseSearchCriteria:
    """Filters, ordering and paging for the course catalogue."""

    is_published: Optional[bool] = None
    is_active: Optional[bool] = None
    instructor_id: Optional[UUID] = None
    title_contains: Optional[str] = None
    description_contains: Optional[str] = None
    category: Optional[str] = None
    tags_contains: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    currency: Optional[str] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None
    published_from: Optional[datetime] = None
    published_to: Optional[datetime] = None
    updated_from: Optional[datetime] = None
    updated_to: Optional[datetime] = None
    min_duration: Optional[int] = None
    max_duration: Optional[int] = None
    min_max_students: Optional[int] = None
    max_max_students: Optional[int] = None
    # (column name, direction) pairs applied in order.
    sort: List[Tuple[str, SortDirection]] = field(default_factory=list)
    page: int = 0
    page_size: int = 25


SORTABLE_COLUMNS = {
    "title": Course.title,
    "price": Course.price,
    "created_at": Course.created_at,
    "published_at": Course.published_at,
    "updated_at": Course.updated_at,
    "duration": Course.duration_minutes,
}


def _contains(column, text: str):
    return func.lower(column).like(f"%{text.lower()}%")


class CoursesRepository:
    """
    Thin data-access layer around the Course aggregate.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def session(self) -> Session:
        return self._session

    def _base_select(self) -> Select[Any]:
        return select(Course).options(selectinload(Course.materials))

    def _apply_filters(self, stmt: Select[Any], criteria: CourseSearchCriteria) -> Select[Any]:
        if criteria.is_published is not None:
            stmt = stmt.where(Course.is_published.is_(criteria.is_published))
        if criteria.is_active is True:
            stmt = stmt.where(Course.deleted_at.is_(None))
        elif criteria.is_active is False:
            stmt = stmt.where(Course.deleted_at.is_not(None))
        if criteria.instructor_id is not None:
            stmt = stmt.where(Course.instructor_id == criteria.instructor_id)
        if criteria.title_contains:
            stmt = stmt.where(_contains(Course.title, criteria.title_contains))
        if criteria.description_contains:
            stmt = stmt.where(_contains(Course.description, criteria.description_contains))
        if criteria.category:
            stmt = stmt.where(func.lower(Course.category) == criteria.category.lower())
        if criteria.tags_contains:
            stmt = stmt.where(_contains(Course.tags, criteria.tags_contains))
        if criteria.min_price is not None:
            stmt = stmt.where(Course.price >= criteria.min_price)
        if criteria.max_price is not None:
            stmt = stmt.where(Course.price <= criteria.max_price)
        if criteria.currency:
            stmt = stmt.where(Course.currency == criteria.currency.upper())
        if criteria.created_from is not None:
            stmt = stmt.where(Course.created_at >= criteria.created_from)
        if criteria.created_to is not None:
            stmt = stmt.where(Course.created_at <= criteria.created_to)
        if criteria.published_from is not None:
            stmt = stmt.where(Course.published_at >= criteria.published_from)
        if criteria.published_to is not None:
            stmt = stmt.where(Course.published_at <= criteria.published_to)
        if criteria.updated_from is not None:
            stmt = stmt.where(Course.updated_at >= criteria.updated_from)
        if criteria.updated_to is not None:
            stmt = stmt.where(Course.updated_at <= criteria.updated_to)
        if criteria.min_duration is not None:
            stmt = stmt.where(Course.duration_minutes >= criteria.min_duration)
        if criteria.max_duration is not None:
            stmt = stmt.where(Course.duration_minutes <= criteria.max_duration)
        if criteria.min_max_students is not None:
            stmt = stmt.where(Course.max_students >= criteria.min_max_students)
        if criteria.max_max_students is not None:
            stmt = stmt.where(Course.max_students <= criteria.max_max_students)
        return stmt

    def _apply_sort(self, stmt: Select[Any], criteria: CourseSearchCriteria) -> Select[Any]:
        ordering = []
        for name, direction in criteria.sort:
            column = SORTABLE_COLUMNS[name]
            ordering.append(column.desc() if direction == SortDirection.DESC else column.asc())
        if not ordering:
            ordering.append(Course.created_at.desc())
        # Stable paging across equal sort keys.
        ordering.append(Course.id.asc())
        return stmt.order_by(*ordering)

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def get_by_id(self, course_id: UUID) -> Optional[Course]:
        stmt = self._base_select().where(Course.id == course_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def exists(self, course_id: UUID) -> bool:
        stmt = select(func.count()).select_from(Course).where(Course.id == course_id)
        return self.session.execute(stmt).scalar_one() > 0

    def search(self, criteria: CourseSearchCriteria) -> Tuple[Sequence[Course], int]:
        """
        Return one page of courses matching ``criteria`` and the total number
        of matches across all pages.
        """
        filtered = self._apply_filters(select(Course), criteria)
        total = self.session.execute(
            select(func.count()).select_from(filtered.subquery())
        ).scalar_one()

        stmt = self._apply_sort(self._apply_filters(self._base_select(), criteria), criteria)
        stmt = stmt.offset(criteria.page * criteria.page_size).limit(criteria.page_size)
        courses = list(self.session.execute(stmt).scalars().all())
        return courses, total

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def add(self, course: Course) -> Course:
        self.session.add(course)
        return course
