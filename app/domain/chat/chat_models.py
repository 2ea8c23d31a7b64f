"""Chat domain models."""

from datetime import datetime

from pydantic import BaseModel, field_validator

MESSAGE_MAX_LENGTH = 500


class SendMessageParams(BaseModel):
    stream_id: str
    text: str

    @field_validator("text")
    @classmethod
    def _text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Message must not be empty")
        if len(v) > MESSAGE_MAX_LENGTH:
            raise ValueError(f"Message must be at most {MESSAGE_MAX_LENGTH} characters")
        return v


class ChatSettingsParams(BaseModel):
    is_chat_enabled: bool
    is_chat_followers_only: bool


class ChatAuthor(BaseModel):
    user_id: str
    username: str
    display_name: str
    avatar: str | None = None


class ChatMessageResponse(BaseModel):
    message_id: str
    stream_id: str
    text: str
    author: ChatAuthor | None = None
    created_at: datetime
