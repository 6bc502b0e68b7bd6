# medicaledu/core/application/features/notifications/handlers.py
from __future__ import annotations

from typing import List

from medicaledu.core.application.features.notifications.models import NotificationResponse
from medicaledu.core.application.features.notifications.requests import (
    CreateNotificationCommand,
    GetNotificationsByUserQuery,
    MarkAllNotificationsReadCommand,
    MarkNotificationReadCommand,
)
from medicaledu.core.application.mediator import Handler, handles
from medicaledu.core.application.result import Result
from medicaledu.core.domain.entities import Notification


@handles(CreateNotificationCommand)
class CreateNotificationHandler(Handler):
    def handle(self, request: CreateNotificationCommand) -> Result[NotificationResponse]:
        if self.uow.users.get_by_id(request.user_id) is None:
            return Result.not_found(f"User with ID {request.user_id} not found.")
        notification = Notification.create(
            user_id=request.user_id,
            type=request.type,
            title=request.title,
            message=request.message,
            related_entity_id=request.related_entity_id,
            related_entity_type=request.related_entity_type,
            scheduled_for=request.scheduled_for,
        )
        self.uow.notifications.add(notification)
        return Result.success(NotificationResponse.model_validate(notification))


@handles(MarkNotificationReadCommand)
class MarkNotificationReadHandler(Handler):
    def handle(self, request: MarkNotificationReadCommand) -> Result[NotificationResponse]:
        notification = self.uow.notifications.get_by_id(request.notification_id)
        if notification is None:
            return Result.not_found(f"Notification with ID {request.notification_id} not found.")
        notification.mark_read()
        return Result.success(NotificationResponse.model_validate(notification))


@handles(MarkAllNotificationsReadCommand)
class MarkAllNotificationsReadHandler(Handler):
    """Mark every unread notification of a user as read; returns how many changed."""

    def handle(self, request: MarkAllNotificationsReadCommand) -> Result[int]:
        unread = self.uow.notifications.list_by_user(request.user_id, unread_only=True, limit=0)
        for notification in unread:
            notification.mark_read()
        return Result.success(len(unread))


@handles(GetNotificationsByUserQuery)
class GetNotificationsByUserHandler(Handler):
    def handle(self, request: GetNotificationsByUserQuery) -> List[NotificationResponse]:
        notifications = self.uow.notifications.list_by_user(
            request.user_id, unread_only=request.unread_only, limit=request.limit
        )
        return [NotificationResponse.model_validate(n) for n in notifications]
