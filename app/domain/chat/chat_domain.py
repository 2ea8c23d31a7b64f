"""Stream chat: persisted messages plus live fan-out over Redis pub/sub.

Every stream has its own channel `chat:{stream_id}`. Senders publish the serialized
`ChatMessageResponse`; WebSocket subscribers of that stream receive it as is.
"""

from collections.abc import AsyncIterator
from typing import Any

import orjson
from loguru import logger
from pymongo import DESCENDING
from redis.asyncio import Redis

from app.domain.follow.follow_domain import is_following
from app.domain.utils.idgen import new_message_id
from app.schemas import ChatMessage, Stream, User
from app.schemas.schema_utils import utc_now
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .chat_models import ChatAuthor, ChatMessageResponse, ChatSettingsParams, SendMessageParams

CHAT_CHANNEL = "chat:{stream_id}"
HISTORY_LIMIT = 50


def chat_channel(stream_id: str) -> str:
    return CHAT_CHANNEL.format(stream_id=stream_id)


def _author(user: User) -> ChatAuthor:
    return ChatAuthor(
        user_id=user.user_id,
        username=user.username,
        display_name=user.display_name,
        avatar=user.avatar,
    )


class ChatService:
    async def find_by_stream(self, stream_id: str) -> list[ChatMessageResponse]:
        messages = (
            await ChatMessage.find(ChatMessage.stream_id == stream_id)
            .sort([("created_at", DESCENDING)])  # type: ignore
            .limit(HISTORY_LIMIT)
            .to_list()
        )
        author_ids = list({m.user_id for m in messages})
        authors = {u.user_id: u for u in await User.find({"user_id": {"$in": author_ids}}).to_list()}

        return [
            ChatMessageResponse(
                message_id=m.message_id,
                stream_id=m.stream_id,
                text=m.text,
                author=_author(authors[m.user_id]) if m.user_id in authors else None,
                created_at=m.created_at,
            )
            for m in messages
        ]

    async def send_message(
        self, user: User, params: SendMessageParams, redis_client: Redis
    ) -> ChatMessageResponse:
        """Store a message and publish it to the stream's live subscribers.

        Raises:
            AppError 404: stream does not exist
            AppError 400: stream offline or chat disabled
            AppError 403: followers-only chat and the sender does not follow the owner
        """
        stream = await Stream.find_one(Stream.stream_id == params.stream_id)
        if stream is None:
            raise AppError(
                errcode=AppErrorCode.E_STREAM_NOT_FOUND,
                errmesg=f"Stream not found: {params.stream_id}",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        if not stream.is_live:
            raise AppError(
                errcode=AppErrorCode.E_STREAM_OFFLINE,
                errmesg="Stream is offline",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        if not stream.is_chat_enabled:
            raise AppError(
                errcode=AppErrorCode.E_CHAT_DISABLED,
                errmesg="Chat is disabled for this stream",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        is_owner = stream.user_id == user.user_id
        if stream.is_chat_followers_only and not is_owner:
            if not await is_following(user.user_id, stream.user_id):
                raise AppError(
                    errcode=AppErrorCode.E_CHAT_FOLLOWERS_ONLY,
                    errmesg="Only followers can write in this chat",
                    status_code=HttpStatusCode.FORBIDDEN,
                )

        message = ChatMessage(
            message_id=new_message_id(),
            stream_id=stream.stream_id,
            user_id=user.user_id,
            text=params.text,
        )
        await message.insert()

        response = ChatMessageResponse(
            message_id=message.message_id,
            stream_id=message.stream_id,
            text=message.text,
            author=_author(user),
            created_at=message.created_at,
        )
        receivers = await redis_client.publish(
            chat_channel(stream.stream_id), orjson.dumps(response.model_dump(mode="json"))
        )
        logger.debug(f"Chat message {message.message_id} published to {receivers} subscriber(s)")
        return response

    async def change_chat_settings(self, user: User, params: ChatSettingsParams) -> bool:
        stream = await Stream.find_one(Stream.user_id == user.user_id)
        if stream is None:
            raise AppError(
                errcode=AppErrorCode.E_STREAM_NOT_FOUND,
                errmesg="Stream not found",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        stream.is_chat_enabled = params.is_chat_enabled
        stream.is_chat_followers_only = params.is_chat_followers_only
        stream.updated_at = utc_now()
        await stream.save()
        return True

    async def clear_stream(self, stream_id: str) -> int:
        result = await ChatMessage.find(ChatMessage.stream_id == stream_id).delete()
        return result.deleted_count if result else 0


async def subscribe(redis_client: Redis, stream_id: str) -> AsyncIterator[dict[str, Any]]:
    """Yield chat messages published for `stream_id` until the consumer stops iterating."""
    pubsub = redis_client.pubsub()
    await pubsub.subscribe(chat_channel(stream_id))
    try:
        async for event in pubsub.listen():
            if event["type"] != "message":
                continue
            yield orjson.loads(event["data"])
    finally:
        await pubsub.unsubscribe(chat_channel(stream_id))
        await pubsub.aclose()
