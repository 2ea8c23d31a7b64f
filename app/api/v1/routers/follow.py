from fastapi import APIRouter, Depends

from app.api.v1.dependency import CurrentUser
from app.api.v1.schemas.base import ApiOut
from app.api.v1.schemas.community import FollowIn
from app.domain.follow.follow_domain import FollowService
from app.domain.follow.follow_models import FollowResponse

router = APIRouter(prefix="/follow", tags=["Follow"])

_follow_service = FollowService()


def get_follow_service() -> FollowService:
    return _follow_service


@router.get("/find_my_followers")
async def find_my_followers(
    user: CurrentUser,
    service: FollowService = Depends(get_follow_service),
) -> ApiOut[list[FollowResponse]]:
    return ApiOut[list[FollowResponse]](results=await service.find_my_followers(user))


@router.get("/find_my_followings")
async def find_my_followings(
    user: CurrentUser,
    service: FollowService = Depends(get_follow_service),
) -> ApiOut[list[FollowResponse]]:
    return ApiOut[list[FollowResponse]](results=await service.find_my_followings(user))


@router.post("/follow")
async def follow(
    body: FollowIn,
    user: CurrentUser,
    service: FollowService = Depends(get_follow_service),
) -> ApiOut[bool]:
    return ApiOut[bool](results=await service.follow(user, body.channel_id))


@router.post("/unfollow")
async def unfollow(
    body: FollowIn,
    user: CurrentUser,
    service: FollowService = Depends(get_follow_service),
) -> ApiOut[bool]:
    return ApiOut[bool](results=await service.unfollow(user, body.channel_id))
