"""Stream domain models."""

from datetime import datetime

from pydantic import BaseModel, field_validator

from app.domain.follow.follow_models import ChannelSummary
from app.services.integrations.livekit_service import IngressType

TITLE_MAX_LENGTH = 100


class StreamResponse(BaseModel):
    stream_id: str
    title: str
    thumbnail_url: str | None = None
    is_live: bool
    is_chat_enabled: bool
    is_chat_followers_only: bool
    owner: ChannelSummary | None = None
    updated_at: datetime


class StreamOwnerResponse(StreamResponse):
    """Stream as seen by its owner, including the ingress credentials."""

    ingress_id: str | None = None
    server_url: str | None = None
    stream_key: str | None = None


class FindStreamsParams(BaseModel):
    take: int = 12
    skip: int = 0
    search_term: str | None = None


class ChangeStreamInfoParams(BaseModel):
    title: str

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        v = v.strip()
        if not v or len(v) > TITLE_MAX_LENGTH:
            raise ValueError(f"Title must be 1 to {TITLE_MAX_LENGTH} characters")
        return v


class GenerateStreamTokenParams(BaseModel):
    channel_id: str


class StreamTokenResponse(BaseModel):
    token: str
    identity: str
    room: str


class CreateIngressParams(BaseModel):
    ingress_type: IngressType = IngressType.RTMP_INPUT
