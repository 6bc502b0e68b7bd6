# medicaledu/db/unit_of_work.py

from __future__ import annotations

from typing import Any, Awaitable, Callable, List, Optional

from sqlalchemy.orm import Session

from medicaledu.core.domain.entities import AggregateRoot
from medicaledu.core.domain.events import DomainEvent
from medicaledu.repositories import (
    AvailabilitySlotsRepository,
    BookingsRepository,
    CoursesRepository,
    EnrollmentsRepository,
    NotificationsRepository,
    PaymentsRepository,
    PromoCodesRepository,
    RatingsRepository,
    UsersRepository,
)
from medicaledu.shared.resilience import execute_with_retry


class UnitOfWork:
    """
    One SQLAlchemy session shared by every repository for the duration of a
    request.

    Handlers only stage changes; the transaction pipeline step decides when
    to ``save_changes`` and ``commit``.
    """

    def __init__(self, session: Session, retry_attempts: Optional[int] = None) -> None:
        self._session = session
        self._retry_attempts = retry_attempts

        self.users = UsersRepository(session)
        self.courses = CoursesRepository(session)
        self.availability_slots = AvailabilitySlotsRepository(session)
        self.bookings = BookingsRepository(session)
        self.payments = PaymentsRepository(session)
        self.enrollments = EnrollmentsRepository(session)
        self.notifications = NotificationsRepository(session)
        self.ratings = RatingsRepository(session)
        self.promo_codes = PromoCodesRepository(session)

    @property
    def session(self) -> Session:
        return self._session

    # ------------------------------------------------------------------
    # Transaction control
    # ------------------------------------------------------------------

    def begin(self) -> None:
        if not self._session.in_transaction():
            self._session.begin()

    def save_changes(self) -> None:
        self._session.flush()

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        # Events of a rolled-back change never happened.
        self.collect_domain_events()
        self._session.rollback()

    async def execute(self, operation: Callable[[], Awaitable[Any]]) -> Any:
        """Run ``operation`` under the retrying execution strategy."""
        return await execute_with_retry(operation, self._retry_attempts)

    # ------------------------------------------------------------------
    # Domain events
    # ------------------------------------------------------------------

    def collect_domain_events(self) -> List[DomainEvent]:
        """Drain the pending events of every aggregate tracked by the session."""
        tracked = list(self._session.identity_map.values()) + list(self._session.new)
        events: List[DomainEvent] = []
        seen = set()
        for obj in tracked:
            if not isinstance(obj, AggregateRoot) or id(obj) in seen:
                continue
            seen.add(id(obj))
            events.extend(obj.domain_events)
            obj.clear_domain_events()
        return events
