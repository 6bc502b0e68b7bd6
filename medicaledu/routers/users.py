# medicaledu/routers/users.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

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
from medicaledu.core.application.mediator import Mediator
from medicaledu.routers.dependencies import found, get_mediator, query_from_params, unwrap
from medicaledu.schemas.users import ChangePasswordBody, ConfirmEmailBody, UserProfileBody

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Register a user")
async def create_user(command: CreateUserCommand, mediator: Mediator = Depends(get_mediator)) -> UserResponse:
    return unwrap(await mediator.send(command))


@router.get("", summary="List users", description="Filter with `role`, `isActive`, `page` and `pageSize`.")
async def list_users(request: Request, mediator: Mediator = Depends(get_mediator)) -> List[UserResponse]:
    return await mediator.send(query_from_params(GetAllUsersQuery, request))


@router.post("/authenticate", summary="Check credentials")
async def authenticate(
    command: AuthenticateUserCommand, mediator: Mediator = Depends(get_mediator)
) -> AuthenticationResponse:
    return unwrap(await mediator.send(command))


@router.post("/password-reset/request", summary="Issue a password-reset token")
async def request_password_reset(
    command: RequestPasswordResetCommand, mediator: Mediator = Depends(get_mediator)
) -> dict:
    unwrap(await mediator.send(command))
    return {"status": "ok", "message": "If the account exists, a reset token has been issued."}


@router.post("/password-reset/confirm", summary="Reset a password with a token")
async def reset_password(command: ResetPasswordCommand, mediator: Mediator = Depends(get_mediator)) -> UserResponse:
    return unwrap(await mediator.send(command))


@router.get("/{user_id}", summary="Get a user")
async def get_user(user_id: UUID, mediator: Mediator = Depends(get_mediator)) -> UserResponse:
    return found(await mediator.send(GetUserByIdQuery(user_id=user_id)), "User", user_id)


@router.put("/{user_id}", summary="Update a user's profile")
async def update_profile(
    user_id: UUID, payload: UserProfileBody, mediator: Mediator = Depends(get_mediator)
) -> UserResponse:
    return unwrap(await mediator.send(UpdateUserProfileCommand(user_id=user_id, **payload.model_dump())))


@router.post("/{user_id}/confirm-email", summary="Confirm an email address")
async def confirm_email(
    user_id: UUID, payload: ConfirmEmailBody, mediator: Mediator = Depends(get_mediator)
) -> UserResponse:
    return unwrap(await mediator.send(ConfirmEmailCommand(user_id=user_id, token=payload.token)))


@router.post("/{user_id}/change-password", summary="Change a password")
async def change_password(
    user_id: UUID, payload: ChangePasswordBody, mediator: Mediator = Depends(get_mediator)
) -> UserResponse:
    return unwrap(await mediator.send(ChangePasswordCommand(user_id=user_id, **payload.model_dump())))


@router.post("/{user_id}/activate", summary="Activate a user")
async def activate_user(user_id: UUID, mediator: Mediator = Depends(get_mediator)) -> UserResponse:
    return unwrap(await mediator.send(ActivateUserCommand(user_id=user_id)))


@router.post("/{user_id}/deactivate", summary="Deactivate a user")
async def deactivate_user(user_id: UUID, mediator: Mediator = Depends(get_mediator)) -> UserResponse:
    return unwrap(await mediator.send(DeactivateUserCommand(user_id=user_id)))
