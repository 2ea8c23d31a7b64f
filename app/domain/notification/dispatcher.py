"""Notification fan-out.

Each event type maps to a pair of message builders: one for the site notification row
and one for the Telegram message. `dispatch` consults the recipient's notification
settings and delivers to every enabled channel.
"""

from collections.abc import Callable
from dataclasses import dataclass
from html import escape
from typing import Any

from loguru import logger

from app.domain.utils.idgen import new_notification_id
from app.schemas import Notification, NotificationType, User
from app.services.integrations import telegram_messages
from app.services.integrations.telegram_service import TelegramService, telegram_service
from app.utils.app_errors import AppError


def _site_stream_start(channel_username: str, channel_display_name: str, **_: Any) -> str:
    return (
        "<b>Don't miss it!</b>"
        f"<p>Join the stream on <a href='/{escape(channel_username)}'>"
        f"{escape(channel_display_name)}</a>.</p>"
    )


def _site_new_follower(follower_username: str, **_: Any) -> str:
    return (
        f"<b>You have a new follower!</b>"
        f"<p><a href='/{escape(follower_username)}'>{escape(follower_username)}</a> "
        "followed your channel.</p>"
    )


def _site_new_sponsorship(plan_title: str, sponsor_username: str, **_: Any) -> str:
    return (
        "<b>New sponsorship!</b>"
        f"<p><a href='/{escape(sponsor_username)}'>{escape(sponsor_username)}</a> "
        f"sponsored your channel with the <strong>{escape(plan_title)}</strong> plan.</p>"
    )


def _site_enable_two_factor(**_: Any) -> str:
    return (
        "<b>Protect your account!</b>"
        "<p>Enable two-factor authentication in your account settings.</p>"
    )


def _telegram_stream_start(channel_username: str, channel_display_name: str, **_: Any) -> str:
    return telegram_messages.stream_start(channel_username, channel_display_name)


def _telegram_new_follower(
    follower_username: str, follower_display_name: str, followers_count: int, **_: Any
) -> str:
    return telegram_messages.new_follower(follower_username, follower_display_name, followers_count)


def _telegram_new_sponsorship(
    plan_title: str, sponsor_username: str, sponsor_display_name: str, **_: Any
) -> str:
    return telegram_messages.new_sponsorship(plan_title, sponsor_username, sponsor_display_name)


def _telegram_enable_two_factor(**_: Any) -> str:
    return telegram_messages.enable_two_factor()


@dataclass(frozen=True)
class DispatchEntry:
    site_message: Callable[..., str]
    telegram_message: Callable[..., str]


DISPATCH_TABLE: dict[NotificationType, DispatchEntry] = {
    NotificationType.STREAM_START: DispatchEntry(_site_stream_start, _telegram_stream_start),
    NotificationType.NEW_FOLLOWER: DispatchEntry(_site_new_follower, _telegram_new_follower),
    NotificationType.NEW_SPONSORSHIP: DispatchEntry(_site_new_sponsorship, _telegram_new_sponsorship),
    NotificationType.ENABLE_TWO_FACTOR: DispatchEntry(
        _site_enable_two_factor, _telegram_enable_two_factor
    ),
}


@dataclass
class DispatchResult:
    notification: Notification | None = None
    telegram_sent: bool = False


class NotificationDispatcher:
    def __init__(self, telegram: TelegramService | None = None):
        self._telegram = telegram or telegram_service

    async def dispatch(self, event: NotificationType, user: User, **data: Any) -> DispatchResult:
        entry = DISPATCH_TABLE[event]
        settings = user.notification_settings
        result = DispatchResult()

        if settings.site_notifications:
            result.notification = Notification(
                notification_id=new_notification_id(),
                user_id=user.user_id,
                type=event,
                message=entry.site_message(**data),
            )
            await result.notification.insert()

        if settings.telegram_notifications and user.telegram_id:
            try:
                await self._telegram.send(user.telegram_id, entry.telegram_message(**data))
                result.telegram_sent = True
            except AppError as e:
                logger.warning(
                    f"Telegram delivery of {event.value} to user_id={user.user_id} failed: {e.errmesg}"
                )

        logger.debug(
            f"Dispatched {event.value} to user_id={user.user_id}: "
            f"site={result.notification is not None}, telegram={result.telegram_sent}"
        )
        return result


notification_dispatcher = NotificationDispatcher()
