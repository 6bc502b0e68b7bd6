# medicaledu/core/application/features/users/handlers.py
from __future__ import annotations

from datetime import timedelta
from typing import List, Optional

import structlog

from medicaledu.core.application.features.users.models import AuthenticationResponse, UserResponse
from medicaledu.core.application.features.users.requests import (
    ActivateUserCommand,
    AuthenticateUserCommand,
    ChangePasswordCommand,
    ConfirmEmailCommand,
    CreateUserCommand,
    DeactivateUserCommand,
    GetAllUsersQuery,
    GetUserByIdQuery,
    RequestPasswordResetCommand,
    ResetPasswordCommand,
    UpdateUserProfileCommand,
)
from medicaledu.core.application.mediator import Handler, handles
from medicaledu.core.application.result import Result
from medicaledu.core.domain.entities import Notification, User
from medicaledu.core.domain.enums import NotificationType

logger = structlog.get_logger()

INVALID_CREDENTIALS = "Invalid email or password."


class UserHandler(Handler):
    def _notify(self, user: User, type_: NotificationType, title: str, message: str) -> None:
        self.uow.notifications.add(
            Notification.create(
                user_id=user.id,
                type=type_,
                title=title,
                message=message,
                related_entity_id=user.id,
                related_entity_type="User",
            )
        )


@handles(CreateUserCommand)
class CreateUserHandler(UserHandler):
    def handle(self, request: CreateUserCommand) -> Result[UserResponse]:
        if self.uow.users.email_exists(request.email):
            logger.info("user_email_taken", email=request.email.strip().lower())
            return Result.conflict(f"A user with email {request.email.strip().lower()} already exists.")

        user = User.create(
            name=request.name,
            email=request.email,
            password=request.password,
            role=request.role,
            timezone=request.timezone,
        )
        if request.phone_number:
            user.update_phone_number(request.phone_number)

        token = user.generate_email_confirmation_token(
            timedelta(hours=self.settings.EMAIL_CONFIRMATION_TOKEN_HOURS)
        )
        self.uow.users.add(user)
        self._notify(
            user,
            NotificationType.EMAIL_VERIFICATION,
            "Confirm your email",
            f"Use this token to confirm your email address: {token}",
        )

        logger.info("user_created", user_id=str(user.id), role=user.role.value)
        return Result.success(UserResponse.from_entity(user))


@handles(ConfirmEmailCommand)
class ConfirmEmailHandler(UserHandler):
    def handle(self, request: ConfirmEmailCommand) -> Result[UserResponse]:
        user = self.uow.users.get_by_id(request.user_id)
        if user is None:
            return Result.not_found(f"User with ID {request.user_id} not found.")
        user.confirm_email(request.token)
        return Result.success(UserResponse.from_entity(user))


@handles(ChangePasswordCommand)
class ChangePasswordHandler(UserHandler):
    def handle(self, request: ChangePasswordCommand) -> Result[UserResponse]:
        user = self.uow.users.get_by_id(request.user_id)
        if user is None:
            return Result.not_found(f"User with ID {request.user_id} not found.")
        if not user.verify_password(request.current_password):
            return Result.unauthorized("Current password is incorrect.")
        user.change_password(request.new_password)
        return Result.success(UserResponse.from_entity(user))


@handles(RequestPasswordResetCommand)
class RequestPasswordResetHandler(UserHandler):
    def handle(self, request: RequestPasswordResetCommand) -> Result[bool]:
        user = self.uow.users.get_by_email(request.email)
        # Unknown and inactive accounts get the same answer as real ones.
        if user is None or not user.is_active:
            logger.info("password_reset_ignored", email=request.email.strip().lower())
            return Result.success(True)

        token = user.generate_password_reset_token(timedelta(hours=self.settings.PASSWORD_RESET_TOKEN_HOURS))
        self._notify(
            user,
            NotificationType.PASSWORD_RESET,
            "Reset your password",
            f"Use this token to reset your password: {token}",
        )
        logger.info("password_reset_requested", user_id=str(user.id))
        return Result.success(True)


@handles(ResetPasswordCommand)
class ResetPasswordHandler(UserHandler):
    def handle(self, request: ResetPasswordCommand) -> Result[UserResponse]:
        user = self.uow.users.get_by_email(request.email)
        if user is None:
            return Result.not_found(f"No user registered with email {request.email.strip().lower()}.")
        user.reset_password(request.token, request.new_password)
        return Result.success(UserResponse.from_entity(user))


@handles(UpdateUserProfileCommand)
class UpdateUserProfileHandler(UserHandler):
    def handle(self, request: UpdateUserProfileCommand) -> Result[UserResponse]:
        user = self.uow.users.get_by_id(request.user_id)
        if user is None:
            return Result.not_found(f"User with ID {request.user_id} not found.")

        if request.name is not None:
            user.update_name(request.name)
        if request.phone_number is not None:
            user.update_phone_number(request.phone_number or None)
        if request.profile_picture_url is not None:
            user.update_profile_picture(request.profile_picture_url or None)
        if request.timezone is not None:
            user.update_timezone(request.timezone)
        return Result.success(UserResponse.from_entity(user))


@handles(ActivateUserCommand)
class ActivateUserHandler(UserHandler):
    def handle(self, request: ActivateUserCommand) -> Result[UserResponse]:
        user = self.uow.users.get_by_id(request.user_id)
        if user is None:
            return Result.not_found(f"User with ID {request.user_id} not found.")
        user.activate()
        return Result.success(UserResponse.from_entity(user))


@handles(DeactivateUserCommand)
class DeactivateUserHandler(UserHandler):
    def handle(self, request: DeactivateUserCommand) -> Result[UserResponse]:
        user = self.uow.users.get_by_id(request.user_id)
        if user is None:
            return Result.not_found(f"User with ID {request.user_id} not found.")
        user.deactivate()
        return Result.success(UserResponse.from_entity(user))


@handles(AuthenticateUserCommand)
class AuthenticateUserHandler(UserHandler):
    """
    Password sign-in.

    Failed attempts are counted and committed even though the result is a
    failure; reaching ``MAX_FAILED_LOGIN_ATTEMPTS`` locks the account.
    """

    def handle(self, request: AuthenticateUserCommand) -> Result[AuthenticationResponse]:
        user = self.uow.users.get_by_email(request.email)
        if user is None:
            logger.info("authentication_failed", reason="unknown_email")
            return Result.unauthorized(INVALID_CREDENTIALS)
        if not user.is_active:
            logger.info("authentication_failed", reason="inactive", user_id=str(user.id))
            return Result.unauthorized("Account is deactivated.")
        if user.is_locked:
            logger.info("authentication_failed", reason="locked", user_id=str(user.id))
            return Result.unauthorized("Account is locked. Try again later.")

        if not user.verify_password(request.password):
            user.record_login_failure(
                self.settings.MAX_FAILED_LOGIN_ATTEMPTS,
                timedelta(minutes=self.settings.ACCOUNT_LOCK_MINUTES),
            )
            logger.info(
                "authentication_failed",
                reason="bad_password",
                user_id=str(user.id),
                attempts=user.failed_login_attempts,
            )
            return Result.unauthorized(INVALID_CREDENTIALS)

        user.record_login_success()
        logger.info("authentication_succeeded", user_id=str(user.id))
        return Result.success(
            AuthenticationResponse(
                user_id=user.id,
                name=user.name,
                email=user.email,
                role=user.role.value,
                last_login_at=user.last_login_at,
            )
        )


@handles(GetUserByIdQuery)
class GetUserByIdHandler(Handler):
    def handle(self, request: GetUserByIdQuery) -> Optional[UserResponse]:
        user = self.uow.users.get_by_id(request.user_id)
        return UserResponse.from_entity(user) if user is not None else None


@handles(GetAllUsersQuery)
class GetAllUsersHandler(Handler):
    def handle(self, request: GetAllUsersQuery) -> List[UserResponse]:
        users = self.uow.users.list_users(
            role=request.role,
            is_active=request.is_active,
            limit=request.page_size,
            offset=request.page * request.page_size,
        )
        return [UserResponse.from_entity(user) for user in users]
