"""Account domain service: registration, email verification and credentials."""

from loguru import logger
from pymongo.errors import DuplicateKeyError

from app.domain.utils.idgen import new_stream_id, new_user_id
from app.schemas import Stream, TokenType, User
from app.schemas.schema_utils import utc_now
from app.services.integrations.mail_service import MailService, mail_service
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .account_models import ChangeEmailParams, ChangePasswordParams, CreateUserParams, UserResponse
from .passwords import hash_password, verify_password
from .session_store import SessionMetadata, SessionRecord, SessionStore
from .tokens import TokenIssuer, token_issuer


def _conflict(errcode: AppErrorCode, errmesg: str) -> AppError:
    return AppError(errcode=errcode, errmesg=errmesg, status_code=HttpStatusCode.CONFLICT)


class AccountService:
    def __init__(self, mail: MailService | None = None, tokens: TokenIssuer | None = None):
        self._mail = mail or mail_service
        self._tokens = tokens or token_issuer

    async def create_user(self, params: CreateUserParams) -> UserResponse:
        """Register a user together with its stream, then mail an email verification link.

        Raises:
            AppError 409: username or email already registered
        """
        if await User.find_one(User.username == params.username):
            raise _conflict(AppErrorCode.E_USERNAME_TAKEN, "This username is already taken")
        if await User.find_one(User.email == params.email):
            raise _conflict(AppErrorCode.E_EMAIL_TAKEN, "This email is already registered")

        user = User(
            user_id=new_user_id(),
            email=params.email,
            username=params.username,
            password=hash_password(params.password),
            display_name=params.username,
        )
        try:
            await user.insert()
        except DuplicateKeyError as e:
            raise _conflict(AppErrorCode.E_CONFLICT, "Username or email already registered") from e

        await Stream(
            stream_id=new_stream_id(),
            user_id=user.user_id,
            title=f"{user.username} stream",
        ).insert()

        logger.info(f"Registered user_id={user.user_id} username={user.username}")

        token = await self._tokens.issue(user, TokenType.EMAIL_VERIFY)
        await self._mail.send_verification_token(user.email, token.token)

        return UserResponse.from_user(user)

    async def verify_email(
        self,
        token: str,
        store: SessionStore,
        metadata: SessionMetadata | None = None,
    ) -> tuple[UserResponse, SessionRecord]:
        """Consume an EMAIL_VERIFY token and sign the owner in."""
        user = await self._tokens.validate(token, TokenType.EMAIL_VERIFY)

        user.is_email_verified = True
        user.updated_at = utc_now()
        await user.save()

        record = await store.create(user.user_id, metadata)
        return UserResponse.from_user(user), record

    async def me(self, user: User) -> UserResponse:
        return UserResponse.from_user(user)

    async def change_email(self, user: User, params: ChangeEmailParams) -> UserResponse:
        if params.email == user.email:
            return UserResponse.from_user(user)

        if await User.find_one(User.email == params.email):
            raise _conflict(AppErrorCode.E_EMAIL_TAKEN, "This email is already registered")

        user.email = params.email
        user.updated_at = utc_now()
        await user.save()
        return UserResponse.from_user(user)

    async def change_password(self, user: User, params: ChangePasswordParams) -> bool:
        if not verify_password(user.password, params.old_password):
            raise AppError(
                errcode=AppErrorCode.E_INVALID_CREDENTIALS,
                errmesg="Wrong old password",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        user.password = hash_password(params.new_password)
        user.updated_at = utc_now()
        await user.save()
        logger.info(f"Password changed for user_id={user.user_id}")
        return True
