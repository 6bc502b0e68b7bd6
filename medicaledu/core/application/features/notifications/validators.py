# medicaledu/core/application/features/notifications/validators.py
from typing import Optional

from pydantic import Field

from medicaledu.core.application.features.notifications.requests import (
    CreateNotificationCommand,
    GetNotificationsByUserQuery,
)
from medicaledu.core.application.validation import RequestRules, validates


@validates(CreateNotificationCommand)
class CreateNotificationRules(RequestRules):
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    related_entity_type: Optional[str] = Field(None, max_length=100)


@validates(GetNotificationsByUserQuery)
class GetNotificationsRules(RequestRules):
    limit: int = Field(100, ge=1, le=500)
