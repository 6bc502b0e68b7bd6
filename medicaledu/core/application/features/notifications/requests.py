# medicaledu/core/application/features/notifications/requests.py
from __future__ import annotations

from datetime import datetime, timedelta
from typing import ClassVar, List, Optional
from uuid import UUID

from medicaledu.core.application.caching import CachePrefixes, cache_invalidation
from medicaledu.core.application.features.notifications.models import NotificationResponse
from medicaledu.core.application.requests import CacheableRequest, Command
from medicaledu.core.application.result import Result
from medicaledu.core.domain.enums import NotificationType

NOTIFICATION_LISTINGS = (CachePrefixes.GET_NOTIFICATIONS, CachePrefixes.GET_NOTIFICATIONS_BY_USER)


@cache_invalidation(NOTIFICATION_LISTINGS, reason="New notification for the user")
class CreateNotificationCommand(Command):
    response_type: ClassVar = Result[NotificationResponse]

    user_id: UUID
    type: NotificationType = NotificationType.GENERAL_ANNOUNCEMENT
    title: str
    message: str
    related_entity_id: Optional[UUID] = None
    related_entity_type: Optional[str] = None
    scheduled_for: Optional[datetime] = None


@cache_invalidation(NOTIFICATION_LISTINGS, reason="Unread state changes")
class MarkNotificationReadCommand(Command):
    response_type: ClassVar = Result[NotificationResponse]

    notification_id: UUID


@cache_invalidation(NOTIFICATION_LISTINGS, reason="Unread state changes")
class MarkAllNotificationsReadCommand(Command):
    response_type: ClassVar = Result[int]

    user_id: UUID


class GetNotificationsByUserQuery(CacheableRequest):
    response_type: ClassVar = List[NotificationResponse]
    cache_duration: ClassVar[timedelta] = timedelta(minutes=2)
    cache_prefix: ClassVar[str] = CachePrefixes.GET_NOTIFICATIONS_BY_USER

    user_id: UUID
    unread_only: bool = False
    limit: int = 100
