"""Tests for following channels."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from app.domain.follow.follow_domain import FollowService, count_followers
from app.schemas import Follow, NotificationType
from app.schemas.schema_utils import utc_now
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from tests.fixtures.user_fixtures import create_user


@pytest.fixture
def mock_dispatcher() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(mock_dispatcher: AsyncMock) -> FollowService:
    return FollowService(dispatcher=mock_dispatcher)


@pytest.mark.usefixtures("clear_collections")
class TestFollow:
    async def test_follow_creates_edge_and_notifies(
        self, beanie_db, service: FollowService, mock_dispatcher: AsyncMock
    ):
        alice = await create_user("alice")
        bob = await create_user("bob")

        assert await service.follow(alice, bob.user_id) is True

        assert await count_followers(bob.user_id) == 1
        mock_dispatcher.dispatch.assert_awaited_once()
        event, recipient = mock_dispatcher.dispatch.await_args.args
        assert event == NotificationType.NEW_FOLLOWER
        assert recipient.user_id == bob.user_id
        assert mock_dispatcher.dispatch.await_args.kwargs == {
            "follower_username": "alice",
            "follower_display_name": "Alice",
            "followers_count": 1,
        }

    async def test_self_follow_is_conflict(self, beanie_db, service: FollowService):
        alice = await create_user("alice")

        with pytest.raises(AppError) as exc_info:
            await service.follow(alice, alice.user_id)

        assert exc_info.value.status_code == HttpStatusCode.CONFLICT
        assert exc_info.value.errcode == AppErrorCode.E_SELF_FOLLOW

    async def test_second_follow_is_conflict(self, beanie_db, service: FollowService):
        alice = await create_user("alice")
        bob = await create_user("bob")
        await service.follow(alice, bob.user_id)

        with pytest.raises(AppError) as exc_info:
            await service.follow(alice, bob.user_id)

        assert exc_info.value.errcode == AppErrorCode.E_ALREADY_FOLLOWING
        assert await Follow.find(Follow.following_id == bob.user_id).count() == 1

    async def test_follow_unknown_channel(self, beanie_db, service: FollowService):
        alice = await create_user("alice")

        with pytest.raises(AppError) as exc_info:
            await service.follow(alice, "us_missing")

        assert exc_info.value.status_code == HttpStatusCode.NOT_FOUND


@pytest.mark.usefixtures("clear_collections")
class TestUnfollow:
    async def test_unfollow(self, beanie_db, service: FollowService):
        alice = await create_user("alice")
        bob = await create_user("bob")
        await service.follow(alice, bob.user_id)

        assert await service.unfollow(alice, bob.user_id) is True
        assert await count_followers(bob.user_id) == 0

    async def test_unfollow_when_not_following(self, beanie_db, service: FollowService):
        alice = await create_user("alice")
        bob = await create_user("bob")

        with pytest.raises(AppError) as exc_info:
            await service.unfollow(alice, bob.user_id)

        assert exc_info.value.status_code == HttpStatusCode.CONFLICT
        assert exc_info.value.errcode == AppErrorCode.E_NOT_FOLLOWING

    async def test_unfollow_self(self, beanie_db, service: FollowService):
        alice = await create_user("alice")

        with pytest.raises(AppError) as exc_info:
            await service.unfollow(alice, alice.user_id)

        assert exc_info.value.errcode == AppErrorCode.E_SELF_FOLLOW


@pytest.mark.usefixtures("clear_collections")
class TestFollowLists:
    async def test_followers_and_followings(self, beanie_db, service: FollowService):
        alice = await create_user("alice")
        bob = await create_user("bob")
        carol = await create_user("carol")
        now = utc_now()
        edges = [(bob, alice, 2), (carol, alice, 1), (alice, carol, 0)]
        for follower, channel, minutes_ago in edges:
            await Follow(
                follower_id=follower.user_id,
                following_id=channel.user_id,
                created_at=now - timedelta(minutes=minutes_ago),
            ).insert()

        followers = await service.find_my_followers(alice)
        followings = await service.find_my_followings(alice)

        assert [f.user.username for f in followers] == ["carol", "bob"]
        assert [f.user.username for f in followings] == ["carol"]
