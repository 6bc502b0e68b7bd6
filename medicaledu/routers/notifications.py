# medicaledu/routers/notifications.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from medicaledu.core.application.features.notifications.models import NotificationResponse
from medicaledu.core.application.features.notifications.requests import (
    CreateNotificationCommand,
    GetNotificationsByUserQuery,
    MarkAllNotificationsReadCommand,
    MarkNotificationReadCommand,
)
from medicaledu.core.application.mediator import Mediator
from medicaledu.routers.dependencies import get_mediator, unwrap

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Send a notification to a user")
async def create_notification(
    command: CreateNotificationCommand, mediator: Mediator = Depends(get_mediator)
) -> NotificationResponse:
    return unwrap(await mediator.send(command))


@router.get("/users/{user_id}", summary="A user's notifications, newest first")
async def list_for_user(
    user_id: UUID,
    unread_only: bool = Query(False, alias="unreadOnly"),
    limit: int = Query(100),
    mediator: Mediator = Depends(get_mediator),
) -> List[NotificationResponse]:
    return await mediator.send(GetNotificationsByUserQuery(user_id=user_id, unread_only=unread_only, limit=limit))


@router.post("/users/{user_id}/read-all", summary="Mark every notification of a user as read")
async def mark_all_read(user_id: UUID, mediator: Mediator = Depends(get_mediator)) -> dict:
    count = unwrap(await mediator.send(MarkAllNotificationsReadCommand(user_id=user_id)))
    return {"status": "ok", "updated": count}


@router.post("/{notification_id}/read", summary="Mark a notification as read")
async def mark_read(notification_id: UUID, mediator: Mediator = Depends(get_mediator)) -> NotificationResponse:
    return unwrap(await mediator.send(MarkNotificationReadCommand(notification_id=notification_id)))
