"""Account domain models."""

import re
from datetime import datetime

from pydantic import BaseModel, EmailStr, field_validator

from app.schemas import NotificationSettings, User

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9]+(?:-[a-zA-Z0-9]+)*$")
PASSWORD_MIN_LENGTH = 8


def validate_username(v: str) -> str:
    v = v.strip()
    if not USERNAME_PATTERN.match(v):
        raise ValueError("Username may contain letters, digits and single dashes")
    return v


def validate_email(v: str) -> str:
    # EmailStr only normalizes the domain part
    return v.lower()


def validate_password(v: str) -> str:
    if len(v) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    return v


class CreateUserParams(BaseModel):
    username: str
    email: EmailStr
    password: str

    @field_validator("username")
    @classmethod
    def _username(cls, v: str) -> str:
        return validate_username(v)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return validate_password(v)


class ChangeEmailParams(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return validate_email(v)


class ChangePasswordParams(BaseModel):
    old_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def _password(cls, v: str) -> str:
        return validate_password(v)


class UserResponse(BaseModel):
    """User as seen by its owner."""

    user_id: str
    email: str
    username: str
    display_name: str
    avatar: str | None = None
    bio: str | None = None
    telegram_id: str | None = None
    is_verified: bool
    is_email_verified: bool
    is_totp_enabled: bool
    is_deactivated: bool
    notification_settings: NotificationSettings
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(**user.model_dump(exclude={"id", "password", "totp_secret"}))
