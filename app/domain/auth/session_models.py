"""Session domain models."""

from datetime import datetime

from pydantic import BaseModel

from .session_store import SessionMetadata, SessionRecord


class LoginParams(BaseModel):
    login: str
    password: str
    pin: str | None = None


class SessionResponse(BaseModel):
    session_id: str
    created_at: datetime
    metadata: SessionMetadata

    @classmethod
    def from_record(cls, record: SessionRecord) -> "SessionResponse":
        return cls(session_id=record.session_id, created_at=record.created_at, metadata=record.metadata)
