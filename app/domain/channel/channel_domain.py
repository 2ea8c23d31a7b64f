"""Public channel lookups. A channel is a user seen from the outside."""

from pymongo import ASCENDING

from app.domain.follow.follow_domain import count_followers, to_channel_summary
from app.domain.stream.stream_domain import to_stream_responses
from app.schemas import Follow, SocialLink, Stream, User
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .channel_models import ChannelResponse, RecommendedChannel

RECOMMENDED_LIMIT = 7


class ChannelService:
    async def find_recommended(self, viewer: User | None = None) -> list[RecommendedChannel]:
        """Active channels with the most followers, excluding the viewer."""
        counts = {
            row["_id"]: row["count"]
            for row in await Follow.aggregate(
                [{"$group": {"_id": "$following_id", "count": {"$sum": 1}}}]
            ).to_list()
        }

        query: dict = {"is_deactivated": False}
        if viewer is not None:
            query["user_id"] = {"$ne": viewer.user_id}
        users = await User.find(query).to_list()
        users.sort(key=lambda u: (counts.get(u.user_id, 0), u.created_at), reverse=True)
        users = users[:RECOMMENDED_LIMIT]

        live = {
            s.user_id
            for s in await Stream.find(
                {"user_id": {"$in": [u.user_id for u in users]}, "is_live": True}
            ).to_list()
        }
        return [
            RecommendedChannel(
                **to_channel_summary(u).model_dump(),
                followers_count=counts.get(u.user_id, 0),
                is_live=u.user_id in live,
            )
            for u in users
        ]

    async def find_by_username(self, username: str) -> ChannelResponse:
        user = await User.find_one(User.username == username, User.is_deactivated == False)  # noqa: E712
        if user is None:
            raise AppError(
                errcode=AppErrorCode.E_CHANNEL_NOT_FOUND,
                errmesg=f"Channel not found: {username}",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        links = (
            await SocialLink.find(SocialLink.user_id == user.user_id)
            .sort([("position", ASCENDING)])  # type: ignore
            .to_list()
        )
        stream = await Stream.find_one(Stream.user_id == user.user_id)
        streams = await to_stream_responses([stream]) if stream else []

        return ChannelResponse(
            **to_channel_summary(user).model_dump(),
            bio=user.bio,
            followers_count=await count_followers(user.user_id),
            social_links=[
                link.model_dump(exclude={"id", "user_id", "updated_at"}) for link in links
            ],
            stream=streams[0] if streams else None,
        )

    async def find_followers_count(self, channel_id: str) -> int:
        return await count_followers(channel_id)
