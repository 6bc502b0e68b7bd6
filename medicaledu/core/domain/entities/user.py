# medicaledu/core/domain/entities/user.py

from __future__ import annotations

import secrets
import string
import uuid
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import Boolean, Enum as SQLEnum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from medicaledu.core.domain.entities.base import AggregateRoot, Base, UTCDateTime, utcnow
from medicaledu.core.domain.enums import UserRole
from medicaledu.core.domain.events import EventType
from medicaledu.core.domain.exceptions import DomainValidationError, InvalidOperationError
from medicaledu.core.domain.value_objects import Email, Password, PhoneNumber, Url

_TOKEN_ALPHABET = string.ascii_letters + string.digits


def generate_token(length: int = 64) -> str:
    return "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(length))


class User(AggregateRoot, Base):
    """
    A platform account: student, instructor or administrator.

    The email is stored normalised (lower-case) and the password only as a
    salted hash.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(254), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, name="user_role_enum"),
        nullable=False,
        default=UserRole.STUDENT,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    email_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_confirmation_token: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    email_confirmation_token_expires_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    password_reset_token: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    password_reset_token_expires_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="UTC")
    phone_number: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    profile_picture_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    last_login_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    failed_login_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    locked_until: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        *,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.STUDENT,
        timezone: str = "UTC",
    ) -> "User":
        if not name or not name.strip():
            raise DomainValidationError("Name is required.")
        user = cls(
            id=uuid.uuid4(),
            name=name.strip(),
            email=Email(value=email).value,
            password_hash=Password.create(password).hashed,
            role=role,
            is_active=True,
            email_confirmed=False,
            timezone=timezone or "UTC",
            failed_login_attempts=0,
            created_at=utcnow(),
        )
        user.raise_event(EventType.USER_CREATED, email=user.email, role=role.value)
        return user

    # ------------------------------------------------------------------
    # Email confirmation
    # ------------------------------------------------------------------

    def generate_email_confirmation_token(self, valid_for: timedelta = timedelta(hours=24)) -> str:
        if self.email_confirmed:
            raise InvalidOperationError("Email is already confirmed.")
        self.email_confirmation_token = generate_token()
        self.email_confirmation_token_expires_at = utcnow() + valid_for
        self.touch()
        return self.email_confirmation_token

    def confirm_email(self, token: str) -> None:
        if not token or not token.strip():
            raise DomainValidationError("Token cannot be empty.")
        if self.email_confirmed:
            raise InvalidOperationError("Email is already confirmed.")
        if self.email_confirmation_token is None or not secrets.compare_digest(self.email_confirmation_token, token):
            raise InvalidOperationError("Invalid confirmation token.")
        if self.email_confirmation_token_expires_at is None or self.email_confirmation_token_expires_at < utcnow():
            raise InvalidOperationError("Confirmation token has expired.")

        self.email_confirmed = True
        self.email_confirmation_token = None
        self.email_confirmation_token_expires_at = None
        self.touch()
        self.raise_event(EventType.USER_EMAIL_CONFIRMED, email=self.email)

    # ------------------------------------------------------------------
    # Passwords
    # ------------------------------------------------------------------

    def verify_password(self, plain: str) -> bool:
        return Password(hashed=self.password_hash).verify(plain)

    def change_password(self, new_password: str) -> None:
        if not new_password or not new_password.strip():
            raise DomainValidationError("Password cannot be empty.")
        if not self.is_active:
            raise InvalidOperationError("Cannot change password for inactive user.")
        self.password_hash = Password.create(new_password).hashed
        self.touch()
        self.raise_event(EventType.USER_PASSWORD_CHANGED)

    def generate_password_reset_token(self, valid_for: timedelta = timedelta(hours=2)) -> str:
        if not self.is_active:
            raise InvalidOperationError("Cannot reset password for inactive user.")
        self.password_reset_token = generate_token()
        self.password_reset_token_expires_at = utcnow() + valid_for
        self.touch()
        return self.password_reset_token

    def reset_password(self, token: str, new_password: str) -> None:
        if not token or not token.strip():
            raise DomainValidationError("Token cannot be empty.")
        if self.password_reset_token is None or not secrets.compare_digest(self.password_reset_token, token):
            raise InvalidOperationError("Invalid password reset token.")
        if self.password_reset_token_expires_at is None or self.password_reset_token_expires_at < utcnow():
            raise InvalidOperationError("Password reset token has expired.")

        self.change_password(new_password)
        self.password_reset_token = None
        self.password_reset_token_expires_at = None
        # A successful reset also lifts a lockout.
        self.failed_login_attempts = 0
        self.locked_until = None

    # ------------------------------------------------------------------
    # Sign-in tracking
    # ------------------------------------------------------------------

    @property
    def is_locked(self) -> bool:
        return self.locked_until is not None and self.locked_until > utcnow()

    def lock_account(self, duration: timedelta) -> None:
        if duration <= timedelta(0):
            raise DomainValidationError("Lock duration must be positive.")
        if self.is_locked:
            raise InvalidOperationError("User is already locked.")
        self.locked_until = utcnow() + duration
        self.touch()
        self.raise_event(EventType.USER_LOCKED, locked_until=self.locked_until.isoformat())

    def record_login_success(self) -> None:
        self.last_login_at = utcnow()
        self.failed_login_attempts = 0
        self.locked_until = None
        self.touch()

    def record_login_failure(self, max_allowed_attempts: int = 5, lock_duration: timedelta = timedelta(minutes=15)) -> None:
        self.failed_login_attempts += 1
        self.touch()
        if self.failed_login_attempts >= max_allowed_attempts and not self.is_locked:
            self.lock_account(lock_duration)

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def update_name(self, name: str) -> None:
        if not name or not name.strip():
            raise DomainValidationError("Name is required.")
        self.name = name.strip()
        self.touch()

    def update_phone_number(self, phone_number: Optional[str]) -> None:
        self.phone_number = PhoneNumber(value=phone_number).value if phone_number else None
        self.touch()

    def update_profile_picture(self, url: Optional[str]) -> None:
        self.profile_picture_url = Url(value=url).value if url else None
        self.touch()

    def update_timezone(self, timezone: str) -> None:
        if not timezone or not timezone.strip():
            raise DomainValidationError("Timezone is required.")
        self.timezone = timezone.strip()
        self.touch()

    def activate(self) -> None:
        if self.is_active:
            raise InvalidOperationError("User is already active.")
        self.is_active = True
        self.deleted_at = None
        self.touch()

    def deactivate(self) -> None:
        if not self.is_active:
            raise InvalidOperationError("User is already inactive.")
        self.is_active = False
        self.deleted_at = utcnow()
        self.touch()
