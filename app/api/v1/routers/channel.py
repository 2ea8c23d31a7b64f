from fastapi import APIRouter, Depends

from app.api.v1.dependency import OptionalUser
from app.api.v1.schemas.base import ApiOut
from app.api.v1.schemas.community import FollowersCountOut
from app.domain.channel.channel_domain import ChannelService
from app.domain.channel.channel_models import ChannelResponse, RecommendedChannel

router = APIRouter(prefix="/channel", tags=["Channel"])

# Singleton instance
_channel_service = ChannelService()


def get_channel_service() -> ChannelService:
    """Get the singleton ChannelService instance."""
    return _channel_service


@router.get("/find_recommended")
async def find_recommended(
    viewer: OptionalUser,
    service: ChannelService = Depends(get_channel_service),
) -> ApiOut[list[RecommendedChannel]]:
    return ApiOut[list[RecommendedChannel]](results=await service.find_recommended(viewer))


@router.get("/find_by_username/{username}")
async def find_by_username(
    username: str,
    service: ChannelService = Depends(get_channel_service),
) -> ApiOut[ChannelResponse]:
    return ApiOut[ChannelResponse](results=await service.find_by_username(username))


@router.get("/find_followers_count/{channel_id}")
async def find_followers_count(
    channel_id: str,
    service: ChannelService = Depends(get_channel_service),
) -> ApiOut[FollowersCountOut]:
    count = await service.find_followers_count(channel_id)
    return ApiOut[FollowersCountOut](results=FollowersCountOut(channel_id=channel_id, followers_count=count))
