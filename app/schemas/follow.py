"""Follow edge ODM schema."""

from datetime import datetime
from typing import Any

import pymongo
from beanie import Document
from pydantic import Field, field_validator
from pymongo import IndexModel

from .schema_utils import parse_mongo_datetime, utc_now


class Follow(Document):
    """Directed edge follower_id -> following_id."""

    follower_id: str
    following_id: str
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "follow"
        indexes = [
            IndexModel(
                [("follower_id", pymongo.ASCENDING), ("following_id", pymongo.ASCENDING)],
                unique=True,
                name="follower_following_unique",
            ),
            "following_id",
        ]
