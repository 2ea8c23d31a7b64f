"""Tests for profile info, avatar and social links."""

from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from app.domain.auth.profile_domain import ProfileService
from app.domain.auth.profile_models import (
    ChangeProfileInfoParams,
    SocialLinkOrder,
    SocialLinkParams,
)
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from tests.fixtures.user_fixtures import create_user


@pytest.fixture
def mock_storage() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(mock_storage: AsyncMock) -> ProfileService:
    return ProfileService(storage=mock_storage)


@pytest.mark.usefixtures("clear_collections")
class TestAvatar:
    async def test_change_avatar_replaces_previous(
        self, beanie_db, service: ProfileService, mock_storage: AsyncMock
    ):
        user = await create_user("alice", avatar="channels/old.webp")

        result = await service.change_avatar(user, b"image-bytes", "image/webp")

        assert result.avatar is not None
        assert result.avatar.startswith(f"channels/{user.user_id}/")
        assert result.avatar.endswith(".webp")
        mock_storage.upload.assert_awaited_once_with(result.avatar, b"image-bytes", "image/webp")
        mock_storage.remove.assert_awaited_once_with("channels/old.webp")

    async def test_change_avatar_rejects_non_image(
        self, beanie_db, service: ProfileService, mock_storage: AsyncMock
    ):
        user = await create_user("alice")

        with pytest.raises(AppError) as exc_info:
            await service.change_avatar(user, b"%PDF", "application/pdf")

        assert exc_info.value.status_code == HttpStatusCode.BAD_REQUEST
        mock_storage.upload.assert_not_awaited()

    async def test_remove_avatar(self, beanie_db, service: ProfileService, mock_storage: AsyncMock):
        user = await create_user("alice", avatar="channels/old.webp")

        result = await service.remove_avatar(user)

        assert result.avatar is None
        mock_storage.remove.assert_awaited_once_with("channels/old.webp")


@pytest.mark.usefixtures("clear_collections")
class TestProfileInfo:
    async def test_change_info(self, beanie_db, service: ProfileService):
        user = await create_user("alice")

        result = await service.change_info(
            user, ChangeProfileInfoParams(username="alice-live", display_name="Alice", bio="hi")
        )

        assert result.username == "alice-live"
        assert result.bio == "hi"

    async def test_change_info_username_taken(self, beanie_db, service: ProfileService):
        user = await create_user("alice")
        await create_user("bob")

        with pytest.raises(AppError) as exc_info:
            await service.change_info(user, ChangeProfileInfoParams(username="bob", display_name="Bob"))

        assert exc_info.value.status_code == HttpStatusCode.CONFLICT
        assert exc_info.value.errcode == AppErrorCode.E_USERNAME_TAKEN


@pytest.mark.usefixtures("clear_collections")
class TestSocialLinks:
    async def test_links_are_appended_in_order(self, beanie_db, service: ProfileService):
        user = await create_user("alice")

        first = await service.create_social_link(user, SocialLinkParams(title="Site", url="https://a.dev"))
        second = await service.create_social_link(user, SocialLinkParams(title="Blog", url="https://b.dev"))

        assert (first.position, second.position) == (1, 2)
        links = await service.find_social_links(user)
        assert [link.title for link in links] == ["Site", "Blog"]

    async def test_reorder(self, beanie_db, service: ProfileService):
        user = await create_user("alice")
        first = await service.create_social_link(user, SocialLinkParams(title="Site", url="https://a.dev"))
        second = await service.create_social_link(user, SocialLinkParams(title="Blog", url="https://b.dev"))

        links = await service.reorder_social_links(
            user,
            [
                SocialLinkOrder(link_id=first.link_id, position=2),
                SocialLinkOrder(link_id=second.link_id, position=1),
            ],
        )

        assert [link.title for link in links] == ["Blog", "Site"]

    async def test_update_and_remove(self, beanie_db, service: ProfileService):
        user = await create_user("alice")
        link = await service.create_social_link(user, SocialLinkParams(title="Site", url="https://a.dev"))

        updated = await service.update_social_link(
            user, link.link_id, SocialLinkParams(title="Home", url="https://home.dev")
        )
        assert updated.title == "Home"

        assert await service.remove_social_link(user, link.link_id) is True
        assert await service.find_social_links(user) == []

    async def test_foreign_link_is_not_found(self, beanie_db, service: ProfileService):
        alice = await create_user("alice")
        bob = await create_user("bob")
        link = await service.create_social_link(alice, SocialLinkParams(title="Site", url="https://a.dev"))

        with pytest.raises(AppError) as exc_info:
            await service.remove_social_link(bob, link.link_id)

        assert exc_info.value.errcode == AppErrorCode.E_SOCIAL_LINK_NOT_FOUND
        assert len(await service.find_social_links(alice)) == 1

    def test_link_url_must_be_http(self):
        with pytest.raises(ValidationError):
            SocialLinkParams(title="Mail", url="mailto:alice@example.com")
