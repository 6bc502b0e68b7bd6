# medicaledu/core/application/features/users/models.py
from datetime import datetime
from typing import Optional
from uuid import UUID

from medicaledu.core.application.dto import ResponseModel
from medicaledu.core.domain.entities import User


class UserResponse(ResponseModel):
    id: UUID
    name: str
    email: str
    role: str
    is_active: bool
    email_confirmed: bool
    timezone: str
    phone_number: Optional[str] = None
    profile_picture_url: Optional[str] = None
    is_locked: bool = False
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role.value,
            is_active=user.is_active,
            email_confirmed=user.email_confirmed,
            timezone=user.timezone,
            phone_number=user.phone_number,
            profile_picture_url=user.profile_picture_url,
            is_locked=user.is_locked,
            last_login_at=user.last_login_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthenticationResponse(ResponseModel):
    user_id: UUID
    name: str
    email: str
    role: str
    last_login_at: Optional[datetime] = None
