"""Ingress management and LiveKit ingress lifecycle events."""

from loguru import logger

from app.domain.chat.chat_domain import ChatService
from app.domain.notification.dispatcher import NotificationDispatcher, notification_dispatcher
from app.schemas import Follow, NotificationType, Stream, User
from app.schemas.schema_utils import utc_now
from app.services.integrations.livekit_service import IngressType, LivekitService, livekit_service

from .stream_domain import get_stream_for_user, to_owner_response
from .stream_models import StreamOwnerResponse


class IngressService:
    def __init__(
        self,
        livekit: LivekitService | None = None,
        dispatcher: NotificationDispatcher | None = None,
        chat: ChatService | None = None,
    ):
        self._livekit = livekit or livekit_service
        self._dispatcher = dispatcher or notification_dispatcher
        self._chat = chat or ChatService()

    async def create(self, user: User, ingress_type: IngressType) -> StreamOwnerResponse:
        """Replace the user's ingress with a fresh one and store its credentials on the stream."""
        stream = await get_stream_for_user(user)

        await self._livekit.reset_ingresses(user.user_id)
        endpoint = await self._livekit.create_ingress(
            ingress_type=ingress_type,
            room_name=user.user_id,
            participant_identity=user.user_id,
            participant_name=user.username,
        )

        stream.ingress_id = endpoint.ingress_id
        stream.server_url = endpoint.url
        stream.stream_key = endpoint.stream_key
        stream.updated_at = utc_now()
        await stream.save()

        logger.info(f"Created {ingress_type.value} ingress {endpoint.ingress_id} for user_id={user.user_id}")
        return to_owner_response(stream, user)

    async def handle_ingress_started(self, ingress_id: str) -> int:
        """Mark the stream live and notify every follower. Returns the number notified."""
        stream = await Stream.find_one(Stream.ingress_id == ingress_id)
        if stream is None:
            logger.warning(f"ingress_started for unknown ingress_id={ingress_id}")
            return 0

        stream.is_live = True
        stream.updated_at = utc_now()
        await stream.save()

        owner = await User.find_one(User.user_id == stream.user_id)
        if owner is None:
            return 0

        edges = await Follow.find(Follow.following_id == owner.user_id).to_list()
        followers = await User.find({"user_id": {"$in": [e.follower_id for e in edges]}}).to_list()
        for follower in followers:
            await self._dispatcher.dispatch(
                NotificationType.STREAM_START,
                follower,
                channel_username=owner.username,
                channel_display_name=owner.display_name,
            )

        logger.info(f"Stream {stream.stream_id} is live, notified {len(followers)} follower(s)")
        return len(followers)

    async def handle_ingress_ended(self, ingress_id: str) -> bool:
        stream = await Stream.find_one(Stream.ingress_id == ingress_id)
        if stream is None:
            logger.warning(f"ingress_ended for unknown ingress_id={ingress_id}")
            return False

        stream.is_live = False
        stream.updated_at = utc_now()
        await stream.save()

        removed = await self._chat.clear_stream(stream.stream_id)
        logger.info(f"Stream {stream.stream_id} ended, removed {removed} chat message(s)")
        return True
