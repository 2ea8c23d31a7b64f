"""Two-phase account deactivation.

Phase one checks the credentials and sends a short-lived numeric code by mail (and
Telegram when linked). Phase two consumes that code, flags the account and signs the
user out everywhere. The daily sweep hard-deletes the account once the retention window
has passed.
"""

from loguru import logger

from app.schemas import TokenType, User
from app.schemas.schema_utils import utc_now
from app.services.integrations.mail_service import MailService, mail_service
from app.services.integrations.telegram_service import TelegramService, telegram_service
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .passwords import verify_password
from .security_models import DeactivateParams, DeactivateResult
from .session_store import SessionMetadata, SessionStore
from .tokens import TokenIssuer, token_issuer


class DeactivateService:
    def __init__(
        self,
        mail: MailService | None = None,
        telegram: TelegramService | None = None,
        tokens: TokenIssuer | None = None,
    ):
        self._mail = mail or mail_service
        self._telegram = telegram or telegram_service
        self._tokens = tokens or token_issuer

    async def deactivate(
        self,
        user: User,
        params: DeactivateParams,
        store: SessionStore,
        metadata: SessionMetadata | None = None,
    ) -> DeactivateResult:
        if params.email.strip().lower() != user.email:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_CREDENTIALS,
                errmesg="Wrong email",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        if not verify_password(user.password, params.password):
            raise AppError(
                errcode=AppErrorCode.E_INVALID_CREDENTIALS,
                errmesg="Wrong password",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        if not params.pin:
            await self._send_deactivate_token(user, metadata)
            return DeactivateResult(confirmation_needed=True, message="Confirmation code required")

        await self._confirm(user, params.pin, store)
        return DeactivateResult(confirmation_needed=False, message="Account deactivated")

    async def _send_deactivate_token(self, user: User, metadata: SessionMetadata | None) -> None:
        token = await self._tokens.issue(user, TokenType.DEACTIVATE_ACCOUNT)
        request_info = (metadata or SessionMetadata()).model_dump()

        await self._mail.send_deactivate_token(user.email, token.token, request_info)

        if user.notification_settings.telegram_notifications and user.telegram_id:
            await self._telegram.send_deactivate_token(user.telegram_id, token.token, request_info)

        logger.info(f"Deactivation code sent to user_id={user.user_id}")

    async def _confirm(self, user: User, pin: str, store: SessionStore) -> None:
        await self._tokens.validate(pin, TokenType.DEACTIVATE_ACCOUNT, user_id=user.user_id)

        now = utc_now()
        user.is_deactivated = True
        user.deactivated_at = now
        user.updated_at = now
        await user.save()

        destroyed = await store.destroy_all_for_user(user.user_id)
        logger.info(f"Deactivated user_id={user.user_id}, destroyed {destroyed} session(s)")
