"""Channel domain models."""

from app.domain.auth.profile_models import SocialLinkResponse
from app.domain.follow.follow_models import ChannelSummary
from app.domain.stream.stream_models import StreamResponse


class ChannelResponse(ChannelSummary):
    bio: str | None = None
    followers_count: int = 0
    social_links: list[SocialLinkResponse] = []
    stream: StreamResponse | None = None


class RecommendedChannel(ChannelSummary):
    followers_count: int = 0
    is_live: bool = False
