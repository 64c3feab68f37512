"""Pydantic schemas for login, users and user settings.

UserRead never includes the password hash; every route that returns a
user goes through it.
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from eventdesk.schemas.common import CamelModel


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserRead(CamelModel):
    id: int
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    email_notifications: bool = False
    browser_notifications: bool = False
    api_change_notifications: bool = False


class UserEnvelope(BaseModel):
    user: UserRead


class UserList(BaseModel):
    users: list[UserRead]


class CurrentUserResponse(BaseModel):
    user: UserRead
    auth_method: str


class UserCreate(CamelModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=6)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class UserSettingsUpdate(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    email_notifications: bool = False
    browser_notifications: bool = False
    api_change_notifications: bool = False


class PasswordUpdate(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self
