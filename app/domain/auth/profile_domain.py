"""Profile domain service: avatar, public info and social links."""

from loguru import logger
from pymongo import ASCENDING, DESCENDING

from app.domain.utils.idgen import new_social_link_id
from app.domain.utils.media import media_key
from app.schemas import SocialLink, User
from app.schemas.schema_utils import utc_now
from app.services.integrations.s3_storage import StorageService, storage_service
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .account_models import UserResponse
from .profile_models import (
    ChangeProfileInfoParams,
    SocialLinkOrder,
    SocialLinkParams,
    SocialLinkResponse,
)


def _link_response(link: SocialLink) -> SocialLinkResponse:
    return SocialLinkResponse(**link.model_dump(exclude={"id", "user_id", "updated_at"}))


class ProfileService:
    def __init__(self, storage: StorageService | None = None):
        self._storage = storage or storage_service

    # ==================== AVATAR ====================

    async def change_avatar(self, user: User, body: bytes, content_type: str | None) -> UserResponse:
        key = media_key("channels", user.user_id, content_type)
        await self._storage.upload(key, body, content_type or "application/octet-stream")

        previous = user.avatar
        user.avatar = key
        user.updated_at = utc_now()
        await user.save()

        if previous:
            await self._storage.remove(previous)
        return UserResponse.from_user(user)

    async def remove_avatar(self, user: User) -> UserResponse:
        if not user.avatar:
            return UserResponse.from_user(user)

        await self._storage.remove(user.avatar)
        user.avatar = None
        user.updated_at = utc_now()
        await user.save()
        return UserResponse.from_user(user)

    # ==================== INFO ====================

    async def change_info(self, user: User, params: ChangeProfileInfoParams) -> UserResponse:
        if params.username != user.username:
            if await User.find_one(User.username == params.username):
                raise AppError(
                    errcode=AppErrorCode.E_USERNAME_TAKEN,
                    errmesg="This username is already taken",
                    status_code=HttpStatusCode.CONFLICT,
                )

        user.username = params.username
        user.display_name = params.display_name
        user.bio = params.bio
        user.updated_at = utc_now()
        await user.save()
        return UserResponse.from_user(user)

    # ==================== SOCIAL LINKS ====================

    async def _get_link(self, user: User, link_id: str) -> SocialLink:
        link = await SocialLink.find_one(SocialLink.link_id == link_id, SocialLink.user_id == user.user_id)
        if link is None:
            raise AppError(
                errcode=AppErrorCode.E_SOCIAL_LINK_NOT_FOUND,
                errmesg=f"Social link not found: {link_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return link

    async def find_social_links(self, user: User) -> list[SocialLinkResponse]:
        links = (
            await SocialLink.find(SocialLink.user_id == user.user_id)
            .sort([("position", ASCENDING)])  # type: ignore
            .to_list()
        )
        return [_link_response(link) for link in links]

    async def create_social_link(self, user: User, params: SocialLinkParams) -> SocialLinkResponse:
        """Append a link after the last one."""
        last = (
            await SocialLink.find(SocialLink.user_id == user.user_id)
            .sort([("position", DESCENDING)])  # type: ignore
            .first_or_none()
        )
        link = SocialLink(
            link_id=new_social_link_id(),
            user_id=user.user_id,
            title=params.title,
            url=params.url,
            position=(last.position + 1) if last else 1,
        )
        await link.insert()
        return _link_response(link)

    async def update_social_link(
        self, user: User, link_id: str, params: SocialLinkParams
    ) -> SocialLinkResponse:
        link = await self._get_link(user, link_id)
        link.title = params.title
        link.url = params.url
        link.updated_at = utc_now()
        await link.save()
        return _link_response(link)

    async def reorder_social_links(
        self, user: User, order: list[SocialLinkOrder]
    ) -> list[SocialLinkResponse]:
        for item in order:
            link = await self._get_link(user, item.link_id)
            if link.position != item.position:
                link.position = item.position
                link.updated_at = utc_now()
                await link.save()
        logger.debug(f"Reordered {len(order)} social link(s) for user_id={user.user_id}")
        return await self.find_social_links(user)

    async def remove_social_link(self, user: User, link_id: str) -> bool:
        link = await self._get_link(user, link_id)
        await link.delete()
        return True
