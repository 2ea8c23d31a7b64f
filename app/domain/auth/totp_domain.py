"""Two-factor (TOTP) enrolment."""

from loguru import logger

from app.app_config import get_app_environ_config
from app.schemas import User
from app.schemas.schema_utils import utc_now
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .security_models import EnableTotpParams, TotpProvisioning
from .totp import generate_secret, provisioning_uri, verify_pin


class TotpService:
    async def generate(self, user: User) -> TotpProvisioning:
        """Fresh secret and its otpauth:// URI. Nothing is stored until `enable`."""
        secret = generate_secret()
        uri = provisioning_uri(secret, user.email, get_app_environ_config().TOTP_ISSUER)
        return TotpProvisioning(secret=secret, uri=uri)

    async def enable(self, user: User, params: EnableTotpParams) -> bool:
        if not verify_pin(params.secret, params.pin):
            raise AppError(
                errcode=AppErrorCode.E_INVALID_TOTP,
                errmesg="Invalid two-factor code",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        user.is_totp_enabled = True
        user.totp_secret = params.secret
        user.updated_at = utc_now()
        await user.save()
        logger.info(f"TOTP enabled for user_id={user.user_id}")
        return True

    async def disable(self, user: User) -> bool:
        user.is_totp_enabled = False
        user.totp_secret = None
        user.updated_at = utc_now()
        await user.save()
        logger.info(f"TOTP disabled for user_id={user.user_id}")
        return True
