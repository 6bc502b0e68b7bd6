# medicaledu/core/application/features/notifications/models.py
from datetime import datetime
from typing import Optional
from uuid import UUID

from medicaledu.core.application.dto import ResponseModel
from medicaledu.core.domain.enums import NotificationType


class NotificationResponse(ResponseModel):
    id: UUID
    user_id: UUID
    type: NotificationType
    title: str
    message: str
    is_read: bool
    read_at: Optional[datetime] = None
    related_entity_id: Optional[UUID] = None
    related_entity_type: Optional[str] = None
    scheduled_for: Optional[datetime] = None
    created_at: datetime

