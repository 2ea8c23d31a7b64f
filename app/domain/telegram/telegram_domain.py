"""Telegram bot commands.

/start <token>  link the chat to the account that issued the TELEGRAM_AUTH token
/start          greeting with setup instructions
/me             profile of the linked account
"""

from loguru import logger

from app.domain.auth.tokens import TokenIssuer, token_issuer
from app.domain.follow.follow_domain import count_followers
from app.schemas import TokenType, User
from app.schemas.schema_utils import utc_now
from app.services.integrations import telegram_messages
from app.services.integrations.telegram_service import TelegramService, telegram_service
from app.utils.app_errors import AppError

from .telegram_models import TelegramUpdate


class TelegramBotService:
    def __init__(self, telegram: TelegramService | None = None, tokens: TokenIssuer | None = None):
        self._telegram = telegram or telegram_service
        self._tokens = tokens or token_issuer

    async def handle_update(self, update: TelegramUpdate) -> str | None:
        """Answer a single update. Returns the command handled, if any."""
        message = update.message
        if message is None or not message.text:
            return None

        chat_id = str(message.chat.id)
        command, _, argument = message.text.strip().partition(" ")
        command = command.split("@", 1)[0].lower()

        if command == "/start":
            await self._start(chat_id, argument.strip())
        elif command == "/me":
            await self._me(chat_id)
        else:
            await self._telegram.send(chat_id, telegram_messages.UNKNOWN_COMMAND)
        return command

    async def _start(self, chat_id: str, token: str) -> None:
        if not token:
            await self._telegram.send(chat_id, telegram_messages.WELCOME)
            return

        try:
            user = await self._tokens.validate(token, TokenType.TELEGRAM_AUTH)
        except AppError as e:
            logger.info(f"Telegram link rejected for chat_id={chat_id}: {e.errcode}")
            await self._telegram.send(chat_id, telegram_messages.INVALID_TOKEN)
            return

        user.telegram_id = chat_id
        user.updated_at = utc_now()
        await user.save()

        logger.info(f"Linked Telegram chat to user_id={user.user_id}")
        await self._telegram.send(chat_id, telegram_messages.AUTH_SUCCESS)

    async def _me(self, chat_id: str) -> None:
        user = await User.find_one(User.telegram_id == chat_id)
        if user is None:
            await self._telegram.send(chat_id, telegram_messages.NOT_LINKED)
            return

        await self._telegram.send(
            chat_id,
            telegram_messages.profile(
                user.username, user.email, user.bio, await count_followers(user.user_id)
            ),
        )
