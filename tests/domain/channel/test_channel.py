"""Tests for public channel lookups."""

import pytest

from app.domain.channel.channel_domain import RECOMMENDED_LIMIT, ChannelService
from app.schemas import Follow, SocialLink, Stream
from app.schemas.schema_utils import utc_now
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from tests.fixtures.user_fixtures import create_user


@pytest.mark.usefixtures("clear_collections")
class TestRecommended:
    async def test_ordered_by_followers(self, beanie_db):
        alice = await create_user("alice")
        bob = await create_user("bob")
        carol = await create_user("carol")
        for follower in (alice, carol):
            await Follow(follower_id=follower.user_id, following_id=bob.user_id).insert()
        await Follow(follower_id=bob.user_id, following_id=carol.user_id).insert()

        channels = await ChannelService().find_recommended()

        assert [c.username for c in channels][:2] == ["bob", "carol"]
        assert channels[0].followers_count == 2

    async def test_excludes_viewer_and_deactivated(self, beanie_db):
        alice = await create_user("alice")
        await create_user("bob")
        await create_user("carol", is_deactivated=True, deactivated_at=utc_now())

        channels = await ChannelService().find_recommended(alice)

        assert [c.username for c in channels] == ["bob"]

    async def test_limit_and_live_flag(self, beanie_db):
        users = [await create_user(f"user{i}") for i in range(RECOMMENDED_LIMIT + 2)]
        stream = await Stream.find_one(Stream.user_id == users[0].user_id)
        assert stream is not None
        stream.is_live = True
        await stream.save()
        await Follow(follower_id=users[1].user_id, following_id=users[0].user_id).insert()

        channels = await ChannelService().find_recommended()

        assert len(channels) == RECOMMENDED_LIMIT
        assert channels[0].user_id == users[0].user_id
        assert channels[0].is_live is True


@pytest.mark.usefixtures("clear_collections")
class TestFindByUsername:
    async def test_channel_page(self, beanie_db):
        alice = await create_user("alice", bio="speedrunner")
        bob = await create_user("bob")
        await Follow(follower_id=bob.user_id, following_id=alice.user_id).insert()
        await SocialLink(
            link_id="sl_2", user_id=alice.user_id, title="Blog", url="https://b.dev", position=2
        ).insert()
        await SocialLink(
            link_id="sl_1", user_id=alice.user_id, title="Site", url="https://a.dev", position=1
        ).insert()

        channel = await ChannelService().find_by_username("alice")

        assert channel.bio == "speedrunner"
        assert channel.followers_count == 1
        assert [link.title for link in channel.social_links] == ["Site", "Blog"]
        assert channel.stream is not None

    async def test_deactivated_channel_is_hidden(self, beanie_db):
        await create_user("alice", is_deactivated=True, deactivated_at=utc_now())

        with pytest.raises(AppError) as exc_info:
            await ChannelService().find_by_username("alice")

        assert exc_info.value.status_code == HttpStatusCode.NOT_FOUND
        assert exc_info.value.errcode == AppErrorCode.E_CHANNEL_NOT_FOUND

    async def test_followers_count(self, beanie_db):
        alice = await create_user("alice")
        bob = await create_user("bob")
        await Follow(follower_id=bob.user_id, following_id=alice.user_id).insert()

        assert await ChannelService().find_followers_count(alice.user_id) == 1
        assert await ChannelService().find_followers_count(bob.user_id) == 0
