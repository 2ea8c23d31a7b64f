"""Tests for ingress creation and ingress lifecycle events."""

from unittest.mock import AsyncMock

import pytest

from app.domain.chat.chat_domain import ChatService
from app.domain.stream.ingress_domain import IngressService
from app.schemas import ChatMessage, Follow, NotificationType, Stream
from app.services.integrations.livekit_service import IngressEndpoint, IngressType, LivekitService
from tests.fixtures.user_fixtures import create_user


@pytest.fixture
def mock_livekit() -> AsyncMock:
    livekit = AsyncMock(spec=LivekitService)
    livekit.create_ingress.return_value = IngressEndpoint(
        ingress_id="IN_new", url="rtmp://ingress.local/live", stream_key="sk_new"
    )
    return livekit


@pytest.fixture
def mock_dispatcher() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(mock_livekit: AsyncMock, mock_dispatcher: AsyncMock) -> IngressService:
    return IngressService(livekit=mock_livekit, dispatcher=mock_dispatcher, chat=ChatService())


@pytest.mark.usefixtures("clear_collections")
class TestCreateIngress:
    async def test_create_replaces_existing_ingress(
        self, beanie_db, service: IngressService, mock_livekit: AsyncMock
    ):
        alice = await create_user("alice")

        result = await service.create(alice, IngressType.WHIP_INPUT)

        mock_livekit.reset_ingresses.assert_awaited_once_with(alice.user_id)
        kwargs = mock_livekit.create_ingress.await_args.kwargs
        assert kwargs["ingress_type"] == IngressType.WHIP_INPUT
        assert kwargs["room_name"] == alice.user_id
        assert result.ingress_id == "IN_new"
        assert result.stream_key == "sk_new"

        stream = await Stream.find_one(Stream.user_id == alice.user_id)
        assert stream is not None
        assert stream.server_url == "rtmp://ingress.local/live"


@pytest.mark.usefixtures("clear_collections")
class TestIngressEvents:
    async def test_started_marks_live_and_notifies_followers(
        self, beanie_db, service: IngressService, mock_dispatcher: AsyncMock
    ):
        alice = await create_user("alice")
        bob = await create_user("bob")
        carol = await create_user("carol")
        stream = await Stream.find_one(Stream.user_id == alice.user_id)
        assert stream is not None
        stream.ingress_id = "IN_alice"
        await stream.save()
        for follower in (bob, carol):
            await Follow(follower_id=follower.user_id, following_id=alice.user_id).insert()

        notified = await service.handle_ingress_started("IN_alice")

        assert notified == 2
        saved = await Stream.find_one(Stream.user_id == alice.user_id)
        assert saved is not None and saved.is_live is True
        recipients = {call.args[1].user_id for call in mock_dispatcher.dispatch.await_args_list}
        assert recipients == {bob.user_id, carol.user_id}
        assert all(
            call.args[0] == NotificationType.STREAM_START
            for call in mock_dispatcher.dispatch.await_args_list
        )

    async def test_ended_goes_offline_and_clears_chat(self, beanie_db, service: IngressService):
        alice = await create_user("alice")
        stream = await Stream.find_one(Stream.user_id == alice.user_id)
        assert stream is not None
        stream.ingress_id = "IN_alice"
        stream.is_live = True
        await stream.save()
        await ChatMessage(
            message_id="cm_1", stream_id=stream.stream_id, user_id=alice.user_id, text="gg"
        ).insert()

        assert await service.handle_ingress_ended("IN_alice") is True

        saved = await Stream.find_one(Stream.user_id == alice.user_id)
        assert saved is not None and saved.is_live is False
        assert await ChatMessage.find(ChatMessage.stream_id == stream.stream_id).count() == 0

    async def test_unknown_ingress_is_ignored(
        self, beanie_db, service: IngressService, mock_dispatcher: AsyncMock
    ):
        assert await service.handle_ingress_started("IN_unknown") == 0
        assert await service.handle_ingress_ended("IN_unknown") is False
        mock_dispatcher.dispatch.assert_not_awaited()

