"""Password recovery through a mailed PASSWORD_RESET token."""

from loguru import logger

from app.schemas import TokenType, User
from app.schemas.schema_utils import utc_now
from app.services.integrations.mail_service import MailService, mail_service
from app.services.integrations.telegram_service import TelegramService, telegram_service
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .passwords import hash_password
from .security_models import NewPasswordParams, ResetPasswordParams
from .session_store import SessionMetadata
from .tokens import TokenIssuer, token_issuer


class PasswordRecoveryService:
    def __init__(
        self,
        mail: MailService | None = None,
        telegram: TelegramService | None = None,
        tokens: TokenIssuer | None = None,
    ):
        self._mail = mail or mail_service
        self._telegram = telegram or telegram_service
        self._tokens = tokens or token_issuer

    async def reset_password(
        self, params: ResetPasswordParams, metadata: SessionMetadata | None = None
    ) -> bool:
        user = await User.find_one(User.email == params.email)
        if user is None:
            raise AppError(
                errcode=AppErrorCode.E_USER_NOT_FOUND,
                errmesg="User not found",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        token = await self._tokens.issue(user, TokenType.PASSWORD_RESET)
        request_info = (metadata or SessionMetadata()).model_dump()

        await self._mail.send_password_reset_token(user.email, token.token, request_info)

        if user.notification_settings.telegram_notifications and user.telegram_id:
            await self._telegram.send_password_reset_token(user.telegram_id, token.token, request_info)

        logger.info(f"Password reset requested for user_id={user.user_id}")
        return True

    async def new_password(self, params: NewPasswordParams) -> bool:
        if params.password != params.password_repeat:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="Passwords do not match",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        user = await self._tokens.validate(params.token, TokenType.PASSWORD_RESET)
        user.password = hash_password(params.password)
        user.updated_at = utc_now()
        await user.save()

        logger.info(f"Password reset completed for user_id={user.user_id}")
        return True
