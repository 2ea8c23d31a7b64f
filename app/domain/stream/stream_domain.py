"""Stream domain service: listing, metadata, thumbnails and room tokens."""

import random
import re

from loguru import logger
from pymongo import DESCENDING

from app.domain.follow.follow_domain import to_channel_summary
from app.domain.utils.idgen import new_ulid
from app.domain.utils.media import media_key
from app.schemas import Stream, User
from app.schemas.schema_utils import utc_now
from app.services.integrations.livekit_service import LivekitService, livekit_service
from app.services.integrations.s3_storage import StorageService, storage_service
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .stream_models import (
    ChangeStreamInfoParams,
    FindStreamsParams,
    StreamOwnerResponse,
    StreamResponse,
    StreamTokenResponse,
)

RANDOM_STREAMS = 4


def _not_found() -> AppError:
    return AppError(
        errcode=AppErrorCode.E_STREAM_NOT_FOUND,
        errmesg="Stream not found",
        status_code=HttpStatusCode.NOT_FOUND,
    )


async def deactivated_user_ids() -> list[str]:
    users = await User.find(User.is_deactivated == True).to_list()  # noqa: E712
    return [u.user_id for u in users]


async def get_stream_for_user(user: User) -> Stream:
    stream = await Stream.find_one(Stream.user_id == user.user_id)
    if stream is None:
        raise _not_found()
    return stream


async def to_stream_responses(streams: list[Stream]) -> list[StreamResponse]:
    owner_ids = list({s.user_id for s in streams})
    owners = {u.user_id: u for u in await User.find({"user_id": {"$in": owner_ids}}).to_list()}
    return [
        StreamResponse(
            **s.model_dump(include=set(StreamResponse.model_fields) - {"owner"}),
            owner=to_channel_summary(owners[s.user_id]) if s.user_id in owners else None,
        )
        for s in streams
    ]


def to_owner_response(stream: Stream, owner: User) -> StreamOwnerResponse:
    return StreamOwnerResponse(
        **stream.model_dump(include=set(StreamOwnerResponse.model_fields) - {"owner"}),
        owner=to_channel_summary(owner),
    )


class StreamService:
    def __init__(
        self,
        storage: StorageService | None = None,
        livekit: LivekitService | None = None,
    ):
        self._storage = storage or storage_service
        self._livekit = livekit or livekit_service

    async def find_all(self, params: FindStreamsParams) -> list[StreamResponse]:
        """Streams of active accounts, live ones first, then most recently updated."""
        query: dict = {"user_id": {"$nin": await deactivated_user_ids()}}

        if params.search_term:
            pattern = re.escape(params.search_term.strip())
            owners = await User.find({"username": {"$regex": pattern, "$options": "i"}}).to_list()
            query["$or"] = [
                {"title": {"$regex": pattern, "$options": "i"}},
                {"user_id": {"$in": [u.user_id for u in owners]}},
            ]

        streams = (
            await Stream.find(query)
            .sort([("is_live", DESCENDING), ("updated_at", DESCENDING)])  # type: ignore
            .skip(params.skip)
            .limit(params.take)
            .to_list()
        )
        return await to_stream_responses(streams)

    async def find_random(self, take: int = RANDOM_STREAMS) -> list[StreamResponse]:
        streams = await Stream.find({"user_id": {"$nin": await deactivated_user_ids()}}).to_list()
        picked = random.sample(streams, k=min(take, len(streams)))
        return await to_stream_responses(picked)

    async def find_mine(self, user: User) -> StreamOwnerResponse:
        return to_owner_response(await get_stream_for_user(user), user)

    async def change_info(self, user: User, params: ChangeStreamInfoParams) -> StreamOwnerResponse:
        stream = await get_stream_for_user(user)
        stream.title = params.title
        stream.updated_at = utc_now()
        await stream.save()
        return to_owner_response(stream, user)

    async def change_thumbnail(
        self, user: User, body: bytes, content_type: str | None
    ) -> StreamOwnerResponse:
        stream = await get_stream_for_user(user)
        key = media_key("streams", stream.stream_id, content_type)
        await self._storage.upload(key, body, content_type or "application/octet-stream")

        previous = stream.thumbnail_url
        stream.thumbnail_url = key
        stream.updated_at = utc_now()
        await stream.save()

        if previous:
            await self._storage.remove(previous)
        return to_owner_response(stream, user)

    async def remove_thumbnail(self, user: User) -> StreamOwnerResponse:
        stream = await get_stream_for_user(user)
        if stream.thumbnail_url:
            await self._storage.remove(stream.thumbnail_url)
            stream.thumbnail_url = None
            stream.updated_at = utc_now()
            await stream.save()
        return to_owner_response(stream, user)

    async def generate_token(self, viewer: User | None, channel_id: str) -> StreamTokenResponse:
        """Room join token for the channel's room (the room is named after the channel id).

        The channel owner joins as host, signed-in users as themselves, everyone else
        under a random anonymous identity. Only the host may publish media.
        """
        channel = await User.find_one(User.user_id == channel_id)
        if channel is None:
            raise AppError(
                errcode=AppErrorCode.E_CHANNEL_NOT_FOUND,
                errmesg=f"Channel not found: {channel_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        is_host = viewer is not None and viewer.user_id == channel.user_id
        if is_host:
            identity, name = f"host-{viewer.user_id}", viewer.username  # type: ignore[union-attr]
        elif viewer is not None:
            identity, name = viewer.user_id, viewer.username
        else:
            identity, name = f"anon-{new_ulid()}", f"Anonymous {random.randint(1000, 9999)}"

        token = self._livekit.create_access_token(
            identity=identity,
            room=channel.user_id,
            name=name,
            can_publish=is_host,
        )
        logger.debug(f"Issued room token identity={identity} room={channel.user_id}")
        return StreamTokenResponse(token=token, identity=identity, room=channel.user_id)
