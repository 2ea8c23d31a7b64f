"""Follow domain models."""

from datetime import datetime

from pydantic import BaseModel


class ChannelSummary(BaseModel):
    user_id: str
    username: str
    display_name: str
    avatar: str | None = None
    is_verified: bool = False


class FollowResponse(BaseModel):
    """A follow edge with the user on the other side of it."""

    user: ChannelSummary
    created_at: datetime
