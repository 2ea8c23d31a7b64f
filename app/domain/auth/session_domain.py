"""Session domain service: login flow and session management."""

from loguru import logger

from app.schemas import User
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .passwords import verify_password
from .session_models import LoginParams, SessionResponse
from .session_store import SessionMetadata, SessionRecord, SessionStore
from .totp import verify_pin


class SessionService:
    async def login(
        self,
        params: LoginParams,
        store: SessionStore,
        metadata: SessionMetadata | None = None,
    ) -> tuple[User, SessionRecord]:
        """Authenticate by username or email, then password, then TOTP pin when enabled.

        Every successful login creates an independent session.

        Raises:
            AppError 404: no user with that username or email
            AppError 401: wrong password, or pin missing or invalid while TOTP is enabled
            AppError 500 E_SESSION_STORE_FAILED: session could not be persisted
        """
        user = await User.find_one(
            {"$or": [{"username": params.login}, {"email": params.login}]},
        )
        if user is None:
            raise AppError(
                errcode=AppErrorCode.E_USER_NOT_FOUND,
                errmesg="User not found",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        if not verify_password(user.password, params.password):
            logger.info(f"Rejected login for user_id={user.user_id}: wrong password")
            raise AppError(
                errcode=AppErrorCode.E_INVALID_CREDENTIALS,
                errmesg="Wrong password",
                status_code=HttpStatusCode.UNAUTHORIZED,
            )

        if user.is_totp_enabled:
            if not params.pin:
                raise AppError(
                    errcode=AppErrorCode.E_TOTP_REQUIRED,
                    errmesg="Two-factor code required",
                    status_code=HttpStatusCode.UNAUTHORIZED,
                )
            if not verify_pin(user.totp_secret, params.pin):
                logger.info(f"Rejected login for user_id={user.user_id}: invalid pin")
                raise AppError(
                    errcode=AppErrorCode.E_INVALID_TOTP,
                    errmesg="Invalid two-factor code",
                    status_code=HttpStatusCode.UNAUTHORIZED,
                )

        record = await store.create(user.user_id, metadata)
        logger.info(f"User logged in: user_id={user.user_id}")
        return user, record

    async def logout(self, store: SessionStore, session_id: str) -> bool:
        await store.destroy(session_id)
        return True

    async def find_by_user(
        self, user: User, store: SessionStore, current_session_id: str
    ) -> list[SessionResponse]:
        """Other sessions of the user, newest first."""
        records = await store.list_for_user(user.user_id)
        return [SessionResponse.from_record(r) for r in records if r.session_id != current_session_id]

    async def find_current(self, store: SessionStore, session_id: str) -> SessionResponse:
        record = await store.get(session_id)
        if record is None:
            raise AppError(
                errcode=AppErrorCode.E_SESSION_NOT_FOUND,
                errmesg="Session not found",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return SessionResponse.from_record(record)

    async def remove(
        self, user: User, store: SessionStore, current_session_id: str, session_id: str
    ) -> bool:
        if session_id == current_session_id:
            raise AppError(
                errcode=AppErrorCode.E_CONFLICT,
                errmesg="The current session cannot be removed",
                status_code=HttpStatusCode.CONFLICT,
            )

        record = await store.get(session_id)
        if record is None or record.user_id != user.user_id:
            raise AppError(
                errcode=AppErrorCode.E_SESSION_NOT_FOUND,
                errmesg="Session not found",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        await store.destroy(session_id)
        return True
