# medicaledu/core/domain/entities/notification.py

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Enum as SQLEnum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from medicaledu.core.domain.entities.base import Base, EntityMixin, UTCDateTime, utcnow
from medicaledu.core.domain.enums import NotificationType
from medicaledu.core.domain.exceptions import DomainValidationError, InvalidOperationError


class Notification(EntityMixin, Base):
    """
    A message addressed to one user.

    Delivery happens elsewhere; this row only records which channels have
    already been used.
    """

    __tablename__ = "notifications"

    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    type: Mapped[NotificationType] = mapped_column(
        SQLEnum(NotificationType, name="notification_type_enum"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    read_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    email_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_sent_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    sms_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sms_sent_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    push_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    push_sent_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    related_entity_id: Mapped[Optional[uuid.UUID]] = mapped_column(nullable=True)
    related_entity_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    scheduled_for: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    @classmethod
    def create(
        cls,
        *,
        user_id: uuid.UUID,
        type: NotificationType,
        title: str,
        message: str,
        related_entity_id: Optional[uuid.UUID] = None,
        related_entity_type: Optional[str] = None,
        scheduled_for: Optional[datetime] = None,
        created_by: Optional[str] = None,
    ) -> "Notification":
        if not user_id:
            raise DomainValidationError("User ID is required.")
        if not title or not title.strip():
            raise DomainValidationError("Title is required.")
        if not message or not message.strip():
            raise DomainValidationError("Message is required.")
        return cls(
            id=uuid.uuid4(),
            user_id=user_id,
            type=type,
            title=title.strip(),
            message=message.strip(),
            is_read=False,
            email_sent=False,
            sms_sent=False,
            push_sent=False,
            related_entity_id=related_entity_id,
            related_entity_type=related_entity_type,
            scheduled_for=scheduled_for,
            created_at=utcnow(),
            created_by=created_by,
        )

    def mark_read(self, modified_by: Optional[str] = None) -> None:
        if self.is_read:
            raise InvalidOperationError("Notification is already read.")
        self.is_read = True
        self.read_at = utcnow()
        self.touch(modified_by)

    def mark_email_sent(self, modified_by: Optional[str] = None) -> None:
        if self.email_sent:
            raise InvalidOperationError("Email has already been sent for this notification.")
        self.email_sent = True
        self.email_sent_at = utcnow()
        self.touch(modified_by)

    def mark_sms_sent(self, modified_by: Optional[str] = None) -> None:
        if self.sms_sent:
            raise InvalidOperationError("SMS has already been sent for this notification.")
        self.sms_sent = True
        self.sms_sent_at = utcnow()
        self.touch(modified_by)

    def mark_push_sent(self, modified_by: Optional[str] = None) -> None:
        if self.push_sent:
            raise InvalidOperationError("Push notification has already been sent for this notification.")
        self.push_sent = True
        self.push_sent_at = utcnow()
        self.touch(modified_by)
