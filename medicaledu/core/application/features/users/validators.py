# medicaledu/core/application/features/users/validators.py
from typing import Iterable, Optional

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from medicaledu.core.application.features.users.requests import (
    AuthenticateUserCommand,
    ChangePasswordCommand,
    ConfirmEmailCommand,
    CreateUserCommand,
    GetAllUsersQuery,
    RequestPasswordResetCommand,
    ResetPasswordCommand,
    UpdateUserProfileCommand,
)
from medicaledu.core.application.validation import PageRules, RequestRules, url_or_none, validates
from medicaledu.core.domain.exceptions import DomainValidationError
from medicaledu.core.domain.value_objects import Password, PhoneNumber, is_valid_email


def _email(value):
    if not is_valid_email(value):
        raise PydanticCustomError("email", "Must be a valid email address")
    return value


def _phone_number(value):
    if not value:
        return value
    try:
        PhoneNumber(value=value)
    except DomainValidationError as exc:
        raise PydanticCustomError("phone_number", exc.message) from exc
    return value


def _password_problems(password: Optional[str]) -> Iterable[str]:
    try:
        Password.validate_strength(password or "")
    except DomainValidationError as exc:
        yield exc.message


@validates(CreateUserCommand)
class CreateUserRules(RequestRules):
    name: str = Field(..., min_length=1, max_length=200)
    email: str
    timezone: str = Field(..., min_length=1, max_length=64)
    phone_number: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, value):
        return _email(value)

    @field_validator("phone_number")
    @classmethod
    def check_phone_number(cls, value):
        return _phone_number(value)


@validates(CreateUserCommand)
def validate_new_password(request: CreateUserCommand) -> Iterable[str]:
    yield from _password_problems(request.password)


@validates(ConfirmEmailCommand)
class ConfirmEmailRules(RequestRules):
    token: str = Field(..., min_length=1)


@validates(ChangePasswordCommand)
class ChangePasswordRules(RequestRules):
    current_password: str = Field(..., min_length=1)


@validates(ChangePasswordCommand)
def validate_change_password(request: ChangePasswordCommand) -> Iterable[str]:
    yield from _password_problems(request.new_password)
    if request.new_password and request.new_password == request.current_password:
        yield "New password must differ from the current password."


@validates(RequestPasswordResetCommand)
class RequestPasswordResetRules(RequestRules):
    email: str

    @field_validator("email")
    @classmethod
    def check_email(cls, value):
        return _email(value)


@validates(ResetPasswordCommand)
class ResetPasswordRules(RequestRules):
    email: str
    token: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def check_email(cls, value):
        return _email(value)


@validates(ResetPasswordCommand)
def validate_reset_password(request: ResetPasswordCommand) -> Iterable[str]:
    yield from _password_problems(request.new_password)


@validates(UpdateUserProfileCommand)
class UpdateProfileRules(RequestRules):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone_number: Optional[str] = None
    profile_picture_url: Optional[str] = None
    timezone: Optional[str] = Field(None, min_length=1, max_length=64)

    @field_validator("phone_number")
    @classmethod
    def check_phone_number(cls, value):
        return _phone_number(value)

    @field_validator("profile_picture_url")
    @classmethod
    def check_url(cls, value):
        return url_or_none(value)


@validates(AuthenticateUserCommand)
class AuthenticateRules(RequestRules):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


@validates(GetAllUsersQuery)
class GetAllUsersRules(PageRules):
    pass
