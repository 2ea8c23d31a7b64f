"""Telegram bot webhook.

Register with `setWebhook?url=<API_BASE_URL>/api/v1/webhooks/telegram&secret_token=<secret>`.
Telegram echoes the secret in the X-Telegram-Bot-Api-Secret-Token header.
"""

import secrets

from fastapi import APIRouter, Depends, Header
from loguru import logger

from app.api.v1.schemas.base import ApiOut
from app.app_config import get_app_environ_config
from app.domain.telegram.telegram_domain import TelegramBotService
from app.domain.telegram.telegram_models import TelegramUpdate
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])

_telegram_bot_service = TelegramBotService()


def get_telegram_bot_service() -> TelegramBotService:
    return _telegram_bot_service


def verify_secret_token(
    x_telegram_bot_api_secret_token: str | None = Header(None),
) -> None:
    expected = get_app_environ_config().TELEGRAM_WEBHOOK_SECRET
    if not expected:
        return
    if not x_telegram_bot_api_secret_token or not secrets.compare_digest(
        x_telegram_bot_api_secret_token, expected
    ):
        raise AppError(
            errcode=AppErrorCode.E_UNAUTHORIZED,
            errmesg="Invalid webhook secret",
            status_code=HttpStatusCode.UNAUTHORIZED,
        )


@router.post("/telegram", dependencies=[Depends(verify_secret_token)])
async def telegram_webhook(
    update: TelegramUpdate,
    service: TelegramBotService = Depends(get_telegram_bot_service),
) -> ApiOut[str | None]:
    command = await service.handle_update(update)
    logger.debug(f"Telegram update {update.update_id} handled: command={command}")
    return ApiOut[str | None](results=command)
