# medicaledu/repositories/notifications.py

from __future__ import annotations

from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from medicaledu.core.domain.entities import Notification


class NotificationsRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        return self.session.get(Notification, notification_id)

    def list_by_user(self, user_id: UUID, *, unread_only: bool = False, limit: int = 100) -> Sequence[Notification]:
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        stmt = stmt.order_by(Notification.created_at.desc())
        if limit:
            stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars().all())

    def add(self, notification: Notification) -> Notification:
        self.session.add(notification)
        return notification
