"""Telegram Bot API sender.

Usage:
    from app.services.integrations.telegram_service import telegram_service

    await telegram_service.send(chat_id, "<b>hello</b>")
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from app.app_config import get_app_environ_config
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from . import telegram_messages as messages


class TelegramService:
    def __init__(self) -> None:
        self._cfg = get_app_environ_config()
        self._demo_mode = bool(self._cfg.DEMO_MODE)
        logger.info("TelegramService initialized")

    def _method_url(self, method: str) -> str:
        if not self._cfg.TELEGRAM_BOT_TOKEN:
            raise AppError(
                errcode=AppErrorCode.E_TELEGRAM_ERROR,
                errmesg="TELEGRAM_BOT_TOKEN not configured",
                status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
            )
        return f"{self._cfg.TELEGRAM_API_BASE_URL}/bot{self._cfg.TELEGRAM_BOT_TOKEN}/{method}"

    async def send(self, chat_id: str, text: str) -> None:
        if self._demo_mode:
            logger.info(f"TelegramService DEMO_MODE=true: stubbed message to chat {chat_id}")
            return

        payload: dict[str, Any] = {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                response = await client.post(self._method_url("sendMessage"), json=payload)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to send Telegram message to chat {chat_id}: {e}")
            raise AppError(
                errcode=AppErrorCode.E_TELEGRAM_ERROR,
                errmesg="Failed to send Telegram message",
                status_code=HttpStatusCode.BAD_GATEWAY,
            ) from e

        logger.debug(f"Sent Telegram message to chat {chat_id}")

    async def send_password_reset_token(self, chat_id: str, token: str, metadata: dict[str, Any]) -> None:
        await self.send(chat_id, messages.reset_password(token, metadata))

    async def send_deactivate_token(self, chat_id: str, token: str, metadata: dict[str, Any]) -> None:
        await self.send(chat_id, messages.deactivate(token, metadata))

    async def send_account_deletion(self, chat_id: str) -> None:
        await self.send(chat_id, messages.ACCOUNT_DELETED)


telegram_service = TelegramService()
