"""Tests for the notification dispatcher."""

from unittest.mock import AsyncMock

import pytest

from app.domain.notification.dispatcher import DISPATCH_TABLE, NotificationDispatcher
from app.schemas import Notification, NotificationType
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from tests.fixtures.user_fixtures import create_user

NO_TELEGRAM = {"site_notifications": True, "telegram_notifications": False}
NO_SITE = {"site_notifications": False, "telegram_notifications": True}


@pytest.fixture
def mock_telegram() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def dispatcher(mock_telegram: AsyncMock) -> NotificationDispatcher:
    return NotificationDispatcher(telegram=mock_telegram)


class TestDispatchTable:
    def test_every_type_has_builders(self):
        assert set(DISPATCH_TABLE) == set(NotificationType)

    def test_site_message_escapes_html(self):
        message = DISPATCH_TABLE[NotificationType.NEW_FOLLOWER].site_message(
            follower_username="<script>", follower_display_name="x", followers_count=1
        )
        assert "<script>" not in message
        assert "&lt;script&gt;" in message


@pytest.mark.usefixtures("clear_collections")
class TestDispatch:
    async def test_site_and_telegram(
        self, beanie_db, dispatcher: NotificationDispatcher, mock_telegram: AsyncMock
    ):
        user = await create_user("alice", telegram_id="4242")

        result = await dispatcher.dispatch(
            NotificationType.STREAM_START,
            user,
            channel_username="bob",
            channel_display_name="Bob",
        )

        assert result.notification is not None
        assert result.telegram_sent is True
        stored = await Notification.find(Notification.user_id == user.user_id).to_list()
        assert len(stored) == 1
        assert stored[0].type == NotificationType.STREAM_START
        assert stored[0].is_read is False
        mock_telegram.send.assert_awaited_once()
        assert mock_telegram.send.await_args.args[0] == "4242"

    async def test_new_sponsorship(
        self, beanie_db, dispatcher: NotificationDispatcher, mock_telegram: AsyncMock
    ):
        user = await create_user("alice", telegram_id="4242")

        result = await dispatcher.dispatch(
            NotificationType.NEW_SPONSORSHIP,
            user,
            plan_title="Gold",
            sponsor_username="bob",
            sponsor_display_name="Bob",
        )

        assert result.notification is not None
        assert result.notification.type == NotificationType.NEW_SPONSORSHIP
        assert "Gold" in result.notification.message
        assert "/bob" in result.notification.message
        assert result.telegram_sent is True
        chat_id, text = mock_telegram.send.await_args.args
        assert chat_id == "4242"
        assert "Gold" in text

    async def test_telegram_requires_linked_chat(
        self, beanie_db, dispatcher: NotificationDispatcher, mock_telegram: AsyncMock
    ):
        user = await create_user("alice")

        result = await dispatcher.dispatch(NotificationType.ENABLE_TWO_FACTOR, user)

        assert result.notification is not None
        assert result.telegram_sent is False
        mock_telegram.send.assert_not_awaited()

    async def test_respects_disabled_telegram(
        self, beanie_db, dispatcher: NotificationDispatcher, mock_telegram: AsyncMock
    ):
        user = await create_user("alice", telegram_id="4242", notification_settings=NO_TELEGRAM)

        await dispatcher.dispatch(NotificationType.ENABLE_TWO_FACTOR, user)

        mock_telegram.send.assert_not_awaited()

    async def test_respects_disabled_site(
        self, beanie_db, dispatcher: NotificationDispatcher, mock_telegram: AsyncMock
    ):
        user = await create_user("alice", telegram_id="4242", notification_settings=NO_SITE)

        result = await dispatcher.dispatch(NotificationType.ENABLE_TWO_FACTOR, user)

        assert result.notification is None
        assert await Notification.find(Notification.user_id == user.user_id).count() == 0
        mock_telegram.send.assert_awaited_once()

    async def test_telegram_failure_keeps_site_notification(
        self, beanie_db, dispatcher: NotificationDispatcher, mock_telegram: AsyncMock
    ):
        user = await create_user("alice", telegram_id="4242")
        mock_telegram.send.side_effect = AppError(
            errcode=AppErrorCode.E_TELEGRAM_ERROR,
            errmesg="blocked by user",
            status_code=HttpStatusCode.BAD_GATEWAY,
        )

        result = await dispatcher.dispatch(NotificationType.ENABLE_TWO_FACTOR, user)

        assert result.notification is not None
        assert result.telegram_sent is False
