# medicaledu/core/application/features/users/requests.py
from __future__ import annotations

from datetime import timedelta
from typing import ClassVar, List, Optional
from uuid import UUID

from medicaledu.core.application.caching import CachePrefixes, cache_invalidation
from medicaledu.core.application.features.courses.requests import COURSE_DATA
from medicaledu.core.application.features.users.models import AuthenticationResponse, UserResponse
from medicaledu.core.application.requests import CacheableRequest, Command
from medicaledu.core.application.result import Result
from medicaledu.core.domain.enums import UserRole

USER_LISTINGS = (CachePrefixes.GET_ALL_USERS, CachePrefixes.GET_USERS_BY_ROLE)
USER_DATA = (CachePrefixes.GET_USER_BY_ID,) + USER_LISTINGS


@cache_invalidation(USER_LISTINGS, reason="New user appears in user listings")
@cache_invalidation(
    (CachePrefixes.GET_NOTIFICATIONS, CachePrefixes.GET_NOTIFICATIONS_BY_USER),
    reason="Email verification notification",
)
class CreateUserCommand(Command):
    response_type: ClassVar = Result[UserResponse]

    name: str = ""
    email: str = ""
    password: str = ""
    role: UserRole = UserRole.STUDENT
    timezone: str = "UTC"
    phone_number: Optional[str] = None


@cache_invalidation(USER_DATA, reason="Email confirmation changes the user")
class ConfirmEmailCommand(Command):
    response_type: ClassVar = Result[UserResponse]

    user_id: UUID
    token: str = ""


@cache_invalidation(USER_DATA, reason="Password change touches the user")
class ChangePasswordCommand(Command):
    response_type: ClassVar = Result[UserResponse]

    user_id: UUID
    current_password: str = ""
    new_password: str = ""


@cache_invalidation(USER_DATA, reason="Reset token issued for the user")
@cache_invalidation(
    (CachePrefixes.GET_NOTIFICATIONS, CachePrefixes.GET_NOTIFICATIONS_BY_USER),
    reason="Password reset notification",
)
class RequestPasswordResetCommand(Command):
    response_type: ClassVar = Result[bool]

    email: str = ""


@cache_invalidation(USER_DATA, reason="Password reset changes the user")
class ResetPasswordCommand(Command):
    response_type: ClassVar = Result[UserResponse]

    email: str = ""
    token: str = ""
    new_password: str = ""


@cache_invalidation(USER_DATA, reason="Profile data is part of the user")
@cache_invalidation(COURSE_DATA, reason="Course pages show the instructor name")
class UpdateUserProfileCommand(Command):
    response_type: ClassVar = Result[UserResponse]

    user_id: UUID
    name: Optional[str] = None
    phone_number: Optional[str] = None
    profile_picture_url: Optional[str] = None
    timezone: Optional[str] = None


@cache_invalidation(USER_DATA, reason="Activation changes the user")
class ActivateUserCommand(Command):
    response_type: ClassVar = Result[UserResponse]

    user_id: UUID


@cache_invalidation(USER_DATA, reason="Deactivation changes the user")
class DeactivateUserCommand(Command):
    response_type: ClassVar = Result[UserResponse]

    user_id: UUID


@cache_invalidation(USER_DATA, reason="Sign-in updates login tracking")
class AuthenticateUserCommand(Command):
    response_type: ClassVar = Result[AuthenticationResponse]

    email: str = ""
    password: str = ""


class GetUserByIdQuery(CacheableRequest):
    response_type: ClassVar = Optional[UserResponse]
    cache_duration: ClassVar[timedelta] = timedelta(minutes=15)
    cache_prefix: ClassVar[str] = CachePrefixes.GET_USER_BY_ID

    user_id: UUID

    def get_cache_key(self) -> str:
        return f"{CachePrefixes.GET_USER_BY_ID}_{self.user_id}"


class GetAllUsersQuery(CacheableRequest):
    response_type: ClassVar = List[UserResponse]
    cache_duration: ClassVar[timedelta] = timedelta(minutes=5)
    cache_prefix: ClassVar[str] = CachePrefixes.GET_ALL_USERS

    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    page: int = 0
    page_size: int = 50

    def get_cache_key(self) -> str:
        if self.role is not None:
            return self.hashed_key(CachePrefixes.GET_USERS_BY_ROLE)
        return self.hashed_key(CachePrefixes.GET_ALL_USERS)
