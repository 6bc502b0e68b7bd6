# medicaledu/repositories/availability_slots.py

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from medicaledu.core.domain.entities import AvailabilitySlot


class AvailabilitySlotsRepository:
    """
    Thin data-access layer around the AvailabilitySlot aggregate.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    def _base_select(self) -> Select[Any]:
        return select(AvailabilitySlot)

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def get_by_id(self, slot_id: UUID) -> Optional[AvailabilitySlot]:
        return self.session.get(AvailabilitySlot, slot_id)

    def list_slots(
        self,
        *,
        instructor_id: Optional[UUID] = None,
        course_id: Optional[UUID] = None,
        is_available: Optional[bool] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[AvailabilitySlot]:
        stmt = self._base_select()
        if instructor_id is not None:
            stmt = stmt.where(AvailabilitySlot.instructor_id == instructor_id)
        if course_id is not None:
            stmt = stmt.where(AvailabilitySlot.course_id == course_id)
        if is_available is True:
            stmt = stmt.where(AvailabilitySlot.current_participants < AvailabilitySlot.max_participants)
        elif is_available is False:
            stmt = stmt.where(AvailabilitySlot.current_participants >= AvailabilitySlot.max_participants)
        if start is not None:
            stmt = stmt.where(AvailabilitySlot.start_time_utc >= start)
        if end is not None:
            stmt = stmt.where(AvailabilitySlot.end_time_utc <= end)

        stmt = stmt.order_by(AvailabilitySlot.start_time_utc.asc())
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars().all())

    def list_available(
        self,
        *,
        start: datetime,
        end: datetime,
        now: datetime,
        instructor_id: Optional[UUID] = None,
    ) -> Sequence[AvailabilitySlot]:
        """Slots inside [start, end] that have not started yet and still have room."""
        stmt = self._base_select().where(
            AvailabilitySlot.start_time_utc >= start,
            AvailabilitySlot.end_time_utc <= end,
            AvailabilitySlot.start_time_utc > now,
            AvailabilitySlot.current_participants < AvailabilitySlot.max_participants,
        )
        if instructor_id is not None:
            stmt = stmt.where(AvailabilitySlot.instructor_id == instructor_id)
        stmt = stmt.order_by(AvailabilitySlot.start_time_utc.asc())
        return list(self.session.execute(stmt).scalars().all())

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def add(self, slot: AvailabilitySlot) -> AvailabilitySlot:
        self.session.add(slot)
        return slot

    def delete(self, slot: AvailabilitySlot) -> None:
        self.session.delete(slot)
