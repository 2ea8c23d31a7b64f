"""Tests for stream listing, metadata and room tokens."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.domain.stream.stream_domain import StreamService
from app.domain.stream.stream_models import ChangeStreamInfoParams, FindStreamsParams
from app.schemas import Stream, User
from app.schemas.schema_utils import utc_now
from app.services.integrations.livekit_service import LivekitService
from app.utils.app_errors import AppError, HttpStatusCode
from tests.fixtures.user_fixtures import create_user


@pytest.fixture
def mock_livekit() -> MagicMock:
    livekit = MagicMock(spec=LivekitService)
    livekit.create_access_token.return_value = "jwt-token"
    return livekit


@pytest.fixture
def mock_storage() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(mock_storage: AsyncMock, mock_livekit: MagicMock) -> StreamService:
    return StreamService(storage=mock_storage, livekit=mock_livekit)


async def _set_stream(user: User, **fields) -> Stream:
    stream = await Stream.find_one(Stream.user_id == user.user_id)
    assert stream is not None
    for key, value in fields.items():
        setattr(stream, key, value)
    await stream.save()
    return stream


@pytest.mark.usefixtures("clear_collections")
class TestFindStreams:
    async def test_live_first_then_recent(self, beanie_db, service: StreamService):
        now = utc_now()
        alice = await create_user("alice")
        bob = await create_user("bob")
        carol = await create_user("carol")
        await _set_stream(alice, updated_at=now - timedelta(hours=2))
        await _set_stream(bob, is_live=True, updated_at=now - timedelta(hours=3))
        await _set_stream(carol, updated_at=now - timedelta(hours=1))

        streams = await service.find_all(FindStreamsParams())

        assert [s.owner.username for s in streams if s.owner] == ["bob", "carol", "alice"]

    async def test_deactivated_owners_are_hidden(self, beanie_db, service: StreamService):
        await create_user("alice")
        await create_user("bob", is_deactivated=True, deactivated_at=utc_now())

        streams = await service.find_all(FindStreamsParams())

        assert [s.owner.username for s in streams if s.owner] == ["alice"]
        assert [s.owner.username for s in await service.find_random() if s.owner] == ["alice"]

    async def test_search_by_title_or_username(self, beanie_db, service: StreamService):
        alice = await create_user("alice")
        await create_user("bob")
        await _set_stream(alice, title="Speedrun night")

        by_title = await service.find_all(FindStreamsParams(search_term="speedrun"))
        by_username = await service.find_all(FindStreamsParams(search_term="BOB"))

        assert [s.title for s in by_title] == ["Speedrun night"]
        assert [s.owner.username for s in by_username if s.owner] == ["bob"]

    async def test_pagination(self, beanie_db, service: StreamService):
        for name in ("alice", "bob", "carol"):
            await create_user(name)

        page = await service.find_all(FindStreamsParams(take=2, skip=2))

        assert len(page) == 1


@pytest.mark.usefixtures("clear_collections")
class TestStreamInfo:
    async def test_find_mine_includes_ingress(self, beanie_db, service: StreamService):
        alice = await create_user("alice")
        await _set_stream(alice, ingress_id="IN_1", server_url="rtmp://x", stream_key="key")

        mine = await service.find_mine(alice)

        assert mine.stream_key == "key"
        assert mine.owner is not None and mine.owner.user_id == alice.user_id

    async def test_change_info(self, beanie_db, service: StreamService):
        alice = await create_user("alice")

        result = await service.change_info(alice, ChangeStreamInfoParams(title="  New title "))

        assert result.title == "New title"

    async def test_change_thumbnail(self, beanie_db, service: StreamService, mock_storage: AsyncMock):
        alice = await create_user("alice")
        await _set_stream(alice, thumbnail_url="streams/old.png")

        result = await service.change_thumbnail(alice, b"png", "image/png")

        assert result.thumbnail_url is not None and result.thumbnail_url.endswith(".png")
        mock_storage.remove.assert_awaited_once_with("streams/old.png")

        cleared = await service.remove_thumbnail(alice)
        assert cleared.thumbnail_url is None


@pytest.mark.usefixtures("clear_collections")
class TestGenerateToken:
    async def test_host_token(self, beanie_db, service: StreamService, mock_livekit: MagicMock):
        alice = await create_user("alice")

        result = await service.generate_token(alice, alice.user_id)

        assert result.identity == f"host-{alice.user_id}"
        assert result.room == alice.user_id
        assert result.token == "jwt-token"
        assert mock_livekit.create_access_token.call_args.kwargs["can_publish"] is True

    async def test_viewer_token(self, beanie_db, service: StreamService, mock_livekit: MagicMock):
        alice = await create_user("alice")
        bob = await create_user("bob")

        result = await service.generate_token(bob, alice.user_id)

        assert result.identity == bob.user_id
        assert mock_livekit.create_access_token.call_args.kwargs["can_publish"] is False

    async def test_anonymous_tokens_are_unique(self, beanie_db, service: StreamService):
        alice = await create_user("alice")

        first = await service.generate_token(None, alice.user_id)
        second = await service.generate_token(None, alice.user_id)

        assert first.identity.startswith("anon-")
        assert first.identity != second.identity

    async def test_unknown_channel(self, beanie_db, service: StreamService):
        with pytest.raises(AppError) as exc_info:
            await service.generate_token(None, "us_missing")

        assert exc_info.value.status_code == HttpStatusCode.NOT_FOUND

    async def test_demo_token_format(self, beanie_db):
        alice = await create_user("alice")

        result = await StreamService(storage=AsyncMock()).generate_token(None, alice.user_id)

        assert result.token == f"DEMO_ACCESS_TOKEN::{alice.user_id}::{result.identity}"
