"""User ODM schema."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import BaseModel, Field, field_validator

from .schema_utils import parse_mongo_datetime, utc_now


class NotificationSettings(BaseModel):
    """Per-user switches gating notification fan-out."""

    site_notifications: bool = True
    telegram_notifications: bool = True


class User(Document):
    """Registered account."""

    user_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    email: Indexed(str, unique=True)  # type: ignore[valid-type]
    username: Indexed(str, unique=True)  # type: ignore[valid-type]
    password: str  # argon2 hash

    display_name: str
    avatar: str | None = None
    bio: str | None = None
    telegram_id: str | None = None

    is_verified: bool = False
    is_email_verified: bool = False

    is_totp_enabled: bool = False
    totp_secret: str | None = None

    is_deactivated: bool = False
    deactivated_at: datetime | None = None

    notification_settings: NotificationSettings = Field(default_factory=NotificationSettings)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", "updated_at", "deactivated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "user"
        indexes = [
            "telegram_id",
            [("is_deactivated", 1), ("deactivated_at", 1)],
        ]
