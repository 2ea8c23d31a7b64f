"""Site notification ODM schema."""

from datetime import datetime
from enum import Enum
from typing import Any

from beanie import Document, Indexed
from pydantic import Field, field_validator

from .schema_utils import parse_mongo_datetime, utc_now


class NotificationType(str, Enum):
    STREAM_START = "STREAM_START"
    NEW_FOLLOWER = "NEW_FOLLOWER"
    NEW_SPONSORSHIP = "NEW_SPONSORSHIP"
    ENABLE_TWO_FACTOR = "ENABLE_TWO_FACTOR"


class Notification(Document):
    notification_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    user_id: Indexed(str)  # type: ignore[valid-type]
    type: NotificationType
    message: str
    is_read: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "notification"
        indexes = [
            [("user_id", 1), ("is_read", 1)],
        ]
