from fastapi import APIRouter, Depends, File, UploadFile

from app.api.v1.dependency import CurrentUser
from app.api.v1.schemas.auth import (
    ChangeProfileInfoIn,
    RemoveSocialLinkIn,
    ReorderSocialLinksIn,
    SocialLinkIn,
    UpdateSocialLinkIn,
)
from app.api.v1.schemas.base import ApiOut
from app.domain.auth.account_models import UserResponse
from app.domain.auth.profile_domain import ProfileService
from app.domain.auth.profile_models import (
    ChangeProfileInfoParams,
    SocialLinkOrder,
    SocialLinkParams,
    SocialLinkResponse,
)

router = APIRouter(prefix="/profile", tags=["Profile"])

_profile_service = ProfileService()


def get_profile_service() -> ProfileService:
    return _profile_service


@router.post("/change_avatar")
async def change_avatar(
    user: CurrentUser,
    avatar: UploadFile = File(...),
    service: ProfileService = Depends(get_profile_service),
) -> ApiOut[UserResponse]:
    body = await avatar.read()
    result = await service.change_avatar(user, body, avatar.content_type)
    return ApiOut[UserResponse](results=result)


@router.post("/remove_avatar")
async def remove_avatar(
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ApiOut[UserResponse]:
    return ApiOut[UserResponse](results=await service.remove_avatar(user))


@router.post("/change_info")
async def change_info(
    body: ChangeProfileInfoIn,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ApiOut[UserResponse]:
    result = await service.change_info(user, ChangeProfileInfoParams(**body.model_dump()))
    return ApiOut[UserResponse](results=result)


@router.get("/find_social_links")
async def find_social_links(
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ApiOut[list[SocialLinkResponse]]:
    return ApiOut[list[SocialLinkResponse]](results=await service.find_social_links(user))


@router.post("/create_social_link")
async def create_social_link(
    body: SocialLinkIn,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ApiOut[SocialLinkResponse]:
    result = await service.create_social_link(user, SocialLinkParams(**body.model_dump()))
    return ApiOut[SocialLinkResponse](results=result)


@router.post("/update_social_link")
async def update_social_link(
    body: UpdateSocialLinkIn,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ApiOut[SocialLinkResponse]:
    params = SocialLinkParams(title=body.title, url=body.url)
    result = await service.update_social_link(user, body.link_id, params)
    return ApiOut[SocialLinkResponse](results=result)


@router.post("/reorder_social_links")
async def reorder_social_links(
    body: ReorderSocialLinksIn,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ApiOut[list[SocialLinkResponse]]:
    order = [SocialLinkOrder(link_id=item.link_id, position=item.position) for item in body.links]
    result = await service.reorder_social_links(user, order)
    return ApiOut[list[SocialLinkResponse]](results=result)


@router.post("/remove_social_link")
async def remove_social_link(
    body: RemoveSocialLinkIn,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ApiOut[bool]:
    return ApiOut[bool](results=await service.remove_social_link(user, body.link_id))
