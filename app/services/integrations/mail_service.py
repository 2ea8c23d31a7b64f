"""SMTP mail sender.

smtplib is blocking, each send runs in a worker thread.

Usage:
    from app.services.integrations.mail_service import mail_service

    await mail_service.send("user@example.com", MailTemplate.VERIFICATION, {"token": token})
"""

from __future__ import annotations

import asyncio
import smtplib
from email.mime.text import MIMEText
from typing import Any

from loguru import logger

from app.app_config import get_app_environ_config
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .mail_templates import MailTemplate, render


class MailService:
    def __init__(self) -> None:
        self._cfg = get_app_environ_config()
        self._demo_mode = bool(self._cfg.DEMO_MODE)
        logger.info("MailService initialized")

    def _deliver(self, to: str, subject: str, html: str) -> None:
        msg = MIMEText(html, "html", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self._cfg.MAIL_FROM
        msg["To"] = to

        with smtplib.SMTP(self._cfg.MAIL_HOST, self._cfg.MAIL_PORT, timeout=30) as server:  # type: ignore[arg-type]
            server.starttls()
            if self._cfg.MAIL_LOGIN:
                server.login(self._cfg.MAIL_LOGIN, self._cfg.MAIL_PASSWORD or "")
            server.sendmail(self._cfg.MAIL_FROM, [to], msg.as_string())

    async def send(self, to: str, template_id: MailTemplate, data: dict[str, Any] | None = None) -> None:
        subject, html = render(template_id, data or {})

        if self._demo_mode:
            logger.info(f"MailService DEMO_MODE=true: stubbed {template_id.value} mail to {to}")
            return

        if not self._cfg.MAIL_HOST:
            raise AppError(
                errcode=AppErrorCode.E_MAIL_ERROR,
                errmesg="MAIL_HOST not configured",
                status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
            )

        try:
            await asyncio.to_thread(self._deliver, to, subject, html)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send {template_id.value} mail to {to}: {e}")
            raise AppError(
                errcode=AppErrorCode.E_MAIL_ERROR,
                errmesg="Failed to send email",
                status_code=HttpStatusCode.BAD_GATEWAY,
            ) from e

        logger.info(f"Sent {template_id.value} mail to {to}")

    async def send_verification_token(self, email: str, token: str) -> None:
        await self.send(email, MailTemplate.VERIFICATION, {"token": token})

    async def send_password_reset_token(self, email: str, token: str, metadata: dict[str, Any]) -> None:
        await self.send(email, MailTemplate.PASSWORD_RECOVERY, {"token": token, "metadata": metadata})

    async def send_deactivate_token(self, email: str, token: str, metadata: dict[str, Any]) -> None:
        await self.send(email, MailTemplate.DEACTIVATE, {"token": token, "metadata": metadata})

    async def send_account_deletion(self, email: str) -> None:
        await self.send(email, MailTemplate.ACCOUNT_DELETION)

    async def send_enable_two_factor(self, email: str) -> None:
        await self.send(email, MailTemplate.ENABLE_TWO_FACTOR)


mail_service = MailService()
