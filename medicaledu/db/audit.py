# medicaledu/db/audit.py
"""
Audit trail.

A ``before_flush`` hook turns every pending insert, update and delete (orphans
included) into an ``AuditLog`` row that is written in the same flush, and
therefore the same transaction, as the change itself.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from decimal import Decimal
from itertools import chain
from typing import Any, Dict, Iterator, Tuple

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session

from medicaledu.core.domain.entities import AuditLog
from medicaledu.core.domain.enums import AuditActionType

REDACTED = "***"
SENSITIVE_FIELDS = frozenset({"password_hash", "email_confirmation_token", "password_reset_token"})


def _to_json(key: str, value: Any) -> Any:
    if value is None:
        return None
    if key in SENSITIVE_FIELDS:
        return REDACTED
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (uuid.UUID, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def snapshot(obj: Any) -> Dict[str, Any]:
    state = inspect(obj)
    return {attr.key: _to_json(attr.key, getattr(obj, attr.key)) for attr in state.mapper.column_attrs}


def changes(obj: Any) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Old and new values of the column attributes modified since load."""
    state = inspect(obj)
    old_values: Dict[str, Any] = {}
    new_values: Dict[str, Any] = {}
    for attr in state.mapper.column_attrs:
        history = state.attrs[attr.key].history
        if not history.has_changes():
            continue
        old_values[attr.key] = _to_json(attr.key, history.deleted[0]) if history.deleted else None
        new_values[attr.key] = _to_json(attr.key, history.added[0]) if history.added else None
    return old_values, new_values


def orphans(session: Session) -> Iterator[Any]:
    """
    Persistent children dropped from a delete-orphan collection.

    The flush deletes them, but they are not in ``session.deleted`` yet.
    """
    seen = set()
    for parent in list(session.dirty):
        state = inspect(parent)
        for relationship in state.mapper.relationships:
            if not (relationship.uselist and relationship.cascade.delete_orphan):
                continue
            for child in state.attrs[relationship.key].history.deleted:
                if id(child) in seen or child in session.deleted or not inspect(child).persistent:
                    continue
                seen.add(id(child))
                yield child


def _entity_id(obj: Any) -> str:
    if getattr(obj, "id", None) is None:
        obj.id = uuid.uuid4()
    return str(obj.id)


def _before_flush(session: Session, flush_context, instances) -> None:
    entries = []

    for obj in session.new:
        if isinstance(obj, AuditLog):
            continue
        entries.append(
            AuditLog.create(
                entity_name=type(obj).__name__,
                entity_id=_entity_id(obj),
                action=AuditActionType.CREATE,
                new_values=snapshot(obj),
            )
        )

    for obj in session.dirty:
        if isinstance(obj, AuditLog) or not session.is_modified(obj, include_collections=False):
            continue
        old_values, new_values = changes(obj)
        if not new_values:
            continue
        entries.append(
            AuditLog.create(
                entity_name=type(obj).__name__,
                entity_id=_entity_id(obj),
                action=AuditActionType.UPDATE,
                old_values=old_values,
                new_values=new_values,
            )
        )

    for obj in chain(list(session.deleted), list(orphans(session))):
        if isinstance(obj, AuditLog):
            continue
        entries.append(
            AuditLog.create(
                entity_name=type(obj).__name__,
                entity_id=_entity_id(obj),
                action=AuditActionType.DELETE,
                old_values=snapshot(obj),
            )
        )

    if entries:
        session.add_all(entries)


def register_audit_listener(target=Session) -> None:
    if not event.contains(target, "before_flush", _before_flush):
        event.listen(target, "before_flush", _before_flush)
