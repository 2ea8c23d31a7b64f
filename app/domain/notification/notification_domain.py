"""Notification domain service."""

from loguru import logger
from pymongo import DESCENDING

from app.domain.auth.tokens import TokenIssuer, token_issuer
from app.schemas import Notification, NotificationSettings, TokenType, User
from app.schemas.schema_utils import utc_now

from .notification_models import (
    NotificationResponse,
    NotificationSettingsParams,
    NotificationSettingsResponse,
)


class NotificationService:
    def __init__(self, tokens: TokenIssuer | None = None):
        self._tokens = tokens or token_issuer

    async def find_unread_count(self, user: User) -> int:
        return await Notification.find(
            Notification.user_id == user.user_id,
            Notification.is_read == False,  # noqa: E712
        ).count()

    async def find_by_user(self, user: User) -> list[NotificationResponse]:
        """Return the user's notifications, newest first, marking the unread ones read."""
        await Notification.find(
            Notification.user_id == user.user_id,
            Notification.is_read == False,  # noqa: E712
        ).update({"$set": {"is_read": True, "updated_at": utc_now()}})

        notifications = (
            await Notification.find(Notification.user_id == user.user_id)
            .sort([("created_at", DESCENDING)])  # type: ignore
            .to_list()
        )
        return [NotificationResponse(**n.model_dump(exclude={"id"})) for n in notifications]

    async def change_settings(
        self, user: User, params: NotificationSettingsParams
    ) -> NotificationSettingsResponse:
        """Store notification switches.

        Enabling Telegram without a linked chat issues a TELEGRAM_AUTH token that the bot
        accepts through `/start <token>`. Disabling Telegram unlinks the chat.
        """
        user.notification_settings = NotificationSettings(
            site_notifications=params.site_notifications,
            telegram_notifications=params.telegram_notifications,
        )

        telegram_auth_token: str | None = None
        if params.telegram_notifications and not user.telegram_id:
            token = await self._tokens.issue(user, TokenType.TELEGRAM_AUTH)
            telegram_auth_token = token.token
        elif not params.telegram_notifications and user.telegram_id:
            logger.info(f"Unlinking Telegram chat for user_id={user.user_id}")
            user.telegram_id = None

        user.updated_at = utc_now()
        await user.save()

        return NotificationSettingsResponse(
            site_notifications=params.site_notifications,
            telegram_notifications=params.telegram_notifications,
            telegram_auth_token=telegram_auth_token,
        )
