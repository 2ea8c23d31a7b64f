"""Stream ODM schema. Every user owns exactly one stream."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import Field, field_validator

from .schema_utils import parse_mongo_datetime, utc_now


class Stream(Document):
    stream_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    user_id: Indexed(str, unique=True)  # type: ignore[valid-type]

    title: str
    thumbnail_url: str | None = None

    # Ingress endpoint handed out to the broadcaster
    ingress_id: str | None = None
    server_url: str | None = None
    stream_key: str | None = None

    is_live: bool = False

    # Chat settings
    is_chat_enabled: bool = True
    is_chat_followers_only: bool = False

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "stream"
        indexes = [
            "ingress_id",
            [("is_live", -1), ("updated_at", -1)],
        ]
