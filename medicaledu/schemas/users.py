# medicaledu/schemas/users.py
from typing import Optional

from medicaledu.schemas.base import RequestBody


class ConfirmEmailBody(RequestBody):
    token: str = ""


class ChangePasswordBody(RequestBody):
    current_password: str = ""
    new_password: str = ""


class UserProfileBody(RequestBody):
    name: Optional[str] = None
    phone_number: Optional[str] = None
    profile_picture_url: Optional[str] = None
    timezone: Optional[str] = None
