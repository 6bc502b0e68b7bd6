# medicaledu/core/domain/entities/base.py

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, declarative_base, mapped_column
from sqlalchemy.types import TypeDecorator

from medicaledu.core.domain.events import DomainEvent, EventType

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC datetimes on every backend.

    SQLite drops tzinfo on the way in and hands back naive values, so both
    directions are normalised here.
    """

    impl = DateTime
    cache_ok = True

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("timezone", True)
        super().__init__(*args, **kwargs)

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        return ensure_utc(value)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        return ensure_utc(value)


# ---------------------------------------------------------------------------
# Mixins
# ---------------------------------------------------------------------------


class EntityMixin:
    """Identity and audit columns shared by every table."""

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_modified_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def touch(self, modified_by: Optional[str] = None) -> None:
        self.updated_at = utcnow()
        if modified_by:
            self.last_modified_by = modified_by


class AggregateRoot(EntityMixin):
    """
    Entity that records domain events until the unit of work collects them.

    Instances loaded by the ORM skip ``__init__``, so the pending list is
    created on first use.
    """

    @property
    def domain_events(self) -> List[DomainEvent]:
        events = getattr(self, "_pending_events", None)
        if events is None:
            events = []
            self._pending_events = events
        return events

    def raise_event(self, event_type: EventType, **payload: Any) -> None:
        self.domain_events.append(
            DomainEvent(type=event_type, aggregate_id=str(self.id), payload=payload)
        )

    def clear_domain_events(self) -> None:
        self.domain_events.clear()
