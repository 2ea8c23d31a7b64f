"""Follow domain service."""

from loguru import logger
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from app.domain.notification.dispatcher import NotificationDispatcher, notification_dispatcher
from app.schemas import Follow, NotificationType, User
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .follow_models import ChannelSummary, FollowResponse


def to_channel_summary(user: User) -> ChannelSummary:
    return ChannelSummary(
        user_id=user.user_id,
        username=user.username,
        display_name=user.display_name,
        avatar=user.avatar,
        is_verified=user.is_verified,
    )


async def count_followers(channel_id: str) -> int:
    return await Follow.find(Follow.following_id == channel_id).count()


async def is_following(follower_id: str, channel_id: str) -> bool:
    edge = await Follow.find_one(
        Follow.follower_id == follower_id,
        Follow.following_id == channel_id,
    )
    return edge is not None


class FollowService:
    def __init__(self, dispatcher: NotificationDispatcher | None = None):
        self._dispatcher = dispatcher or notification_dispatcher

    async def _get_channel(self, channel_id: str) -> User:
        channel = await User.find_one(User.user_id == channel_id)
        if channel is None:
            raise AppError(
                errcode=AppErrorCode.E_CHANNEL_NOT_FOUND,
                errmesg=f"Channel not found: {channel_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return channel

    async def _users_by_id(self, user_ids: list[str]) -> dict[str, User]:
        if not user_ids:
            return {}
        users = await User.find({"user_id": {"$in": user_ids}}).to_list()
        return {u.user_id: u for u in users}

    async def find_my_followers(self, user: User) -> list[FollowResponse]:
        edges = (
            await Follow.find(Follow.following_id == user.user_id)
            .sort([("created_at", DESCENDING)])  # type: ignore
            .to_list()
        )
        users = await self._users_by_id([e.follower_id for e in edges])
        return [
            FollowResponse(user=to_channel_summary(users[e.follower_id]), created_at=e.created_at)
            for e in edges
            if e.follower_id in users
        ]

    async def find_my_followings(self, user: User) -> list[FollowResponse]:
        edges = (
            await Follow.find(Follow.follower_id == user.user_id)
            .sort([("created_at", DESCENDING)])  # type: ignore
            .to_list()
        )
        users = await self._users_by_id([e.following_id for e in edges])
        return [
            FollowResponse(user=to_channel_summary(users[e.following_id]), created_at=e.created_at)
            for e in edges
            if e.following_id in users
        ]

    async def follow(self, user: User, channel_id: str) -> bool:
        """Create the edge user -> channel and notify the channel owner.

        Raises:
            AppError 404: channel does not exist
            AppError 409: self-follow, or the edge already exists
        """
        channel = await self._get_channel(channel_id)

        if channel.user_id == user.user_id:
            raise AppError(
                errcode=AppErrorCode.E_SELF_FOLLOW,
                errmesg="You cannot follow yourself",
                status_code=HttpStatusCode.CONFLICT,
            )

        if await is_following(user.user_id, channel.user_id):
            raise AppError(
                errcode=AppErrorCode.E_ALREADY_FOLLOWING,
                errmesg="You already follow this channel",
                status_code=HttpStatusCode.CONFLICT,
            )

        try:
            await Follow(follower_id=user.user_id, following_id=channel.user_id).insert()
        except DuplicateKeyError as e:
            # lost a race against a concurrent follow of the same pair
            raise AppError(
                errcode=AppErrorCode.E_ALREADY_FOLLOWING,
                errmesg="You already follow this channel",
                status_code=HttpStatusCode.CONFLICT,
            ) from e

        logger.info(f"user_id={user.user_id} followed channel_id={channel.user_id}")

        await self._dispatcher.dispatch(
            NotificationType.NEW_FOLLOWER,
            channel,
            follower_username=user.username,
            follower_display_name=user.display_name,
            followers_count=await count_followers(channel.user_id),
        )
        return True

    async def unfollow(self, user: User, channel_id: str) -> bool:
        channel = await self._get_channel(channel_id)

        if channel.user_id == user.user_id:
            raise AppError(
                errcode=AppErrorCode.E_SELF_FOLLOW,
                errmesg="You cannot unfollow yourself",
                status_code=HttpStatusCode.CONFLICT,
            )

        result = await Follow.find_one(
            Follow.follower_id == user.user_id,
            Follow.following_id == channel.user_id,
        ).delete()
        if result is None or result.deleted_count == 0:
            raise AppError(
                errcode=AppErrorCode.E_NOT_FOLLOWING,
                errmesg="You do not follow this channel",
                status_code=HttpStatusCode.CONFLICT,
            )

        logger.info(f"user_id={user.user_id} unfollowed channel_id={channel.user_id}")
        return True
