"""Profile domain models."""

from datetime import datetime

from pydantic import BaseModel, field_validator

from .account_models import validate_username

DISPLAY_NAME_MAX_LENGTH = 64
BIO_MAX_LENGTH = 300


class ChangeProfileInfoParams(BaseModel):
    username: str
    display_name: str
    bio: str | None = None

    @field_validator("username")
    @classmethod
    def _username(cls, v: str) -> str:
        return validate_username(v)

    @field_validator("display_name")
    @classmethod
    def _display_name(cls, v: str) -> str:
        v = v.strip()
        if not v or len(v) > DISPLAY_NAME_MAX_LENGTH:
            raise ValueError(f"Display name must be 1 to {DISPLAY_NAME_MAX_LENGTH} characters")
        return v

    @field_validator("bio")
    @classmethod
    def _bio(cls, v: str | None) -> str | None:
        if v is not None and len(v) > BIO_MAX_LENGTH:
            raise ValueError(f"Bio must be at most {BIO_MAX_LENGTH} characters")
        return v


class SocialLinkParams(BaseModel):
    title: str
    url: str

    @field_validator("url")
    @classmethod
    def _url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("Link must start with http:// or https://")
        return v


class SocialLinkOrder(BaseModel):
    link_id: str
    position: int


class SocialLinkResponse(BaseModel):
    link_id: str
    title: str
    url: str
    position: int
    created_at: datetime
