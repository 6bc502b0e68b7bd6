# medicaledu/core/domain/entities/audit_log.py

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

from sqlalchemy import Enum as SQLEnum, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from medicaledu.core.domain.entities.base import Base, EntityMixin, utcnow
from medicaledu.core.domain.enums import AuditActionType
from medicaledu.core.domain.exceptions import DomainValidationError


class AuditLog(EntityMixin, Base):
    """One row per entity change, written by the session audit hook."""

    __tablename__ = "audit_logs"

    entity_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    entity_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    action: Mapped[AuditActionType] = mapped_column(
        SQLEnum(AuditActionType, name="audit_action_enum"), nullable=False
    )
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    old_values: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    new_values: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    @classmethod
    def create(
        cls,
        *,
        entity_name: str,
        entity_id: str,
        action: AuditActionType,
        old_values: Optional[Dict[str, Any]] = None,
        new_values: Optional[Dict[str, Any]] = None,
        user_id: Optional[uuid.UUID] = None,
        created_by: Optional[str] = None,
    ) -> "AuditLog":
        if not entity_name or not entity_name.strip():
            raise DomainValidationError("Entity name is required.")
        if not entity_id or not str(entity_id).strip():
            raise DomainValidationError("Entity ID is required.")
        return cls(
            id=uuid.uuid4(),
            entity_name=entity_name,
            entity_id=str(entity_id),
            action=action,
            old_values=old_values,
            new_values=new_values,
            user_id=user_id,
            created_at=utcnow(),
            created_by=created_by,
        )
