"""Single-use token ODM schema."""

from datetime import datetime
from enum import Enum
from typing import Any

import pymongo
from beanie import Document, Indexed
from pydantic import Field, field_validator
from pymongo import IndexModel

from .schema_utils import parse_mongo_datetime, utc_now


class TokenType(str, Enum):
    EMAIL_VERIFY = "EMAIL_VERIFY"
    PASSWORD_RESET = "PASSWORD_RESET"
    DEACTIVATE_ACCOUNT = "DEACTIVATE_ACCOUNT"
    TELEGRAM_AUTH = "TELEGRAM_AUTH"


class Token(Document):
    """Typed, expiring credential. The row is deleted when consumed."""

    token: str
    type: TokenType
    user_id: Indexed(str)  # type: ignore[valid-type]
    expires_in: datetime
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("expires_in", "created_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)

    class Settings:
        name = "token"
        indexes = [
            IndexModel(
                [("token", pymongo.ASCENDING), ("type", pymongo.ASCENDING)],
                unique=True,
                name="token_type_unique",
            ),
            "expires_in",
        ]
