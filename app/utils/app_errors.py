"""Application error types shared by domain services and API handlers."""

import inspect
from enum import Enum, IntEnum
from uuid import uuid4


class AppErrorCode(str, Enum):
    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"
    E_INVALID_REQUEST = "E_INVALID_REQUEST"
    E_INVALID_PARAMS = "E_INVALID_PARAMS"
    E_NOT_FOUND = "E_NOT_FOUND"
    E_CONFLICT = "E_CONFLICT"
    E_FORBIDDEN = "E_FORBIDDEN"

    # Auth
    E_UNAUTHORIZED = "E_UNAUTHORIZED"
    E_BAD_TOKEN = "E_BAD_TOKEN"
    E_INVALID_CREDENTIALS = "E_INVALID_CREDENTIALS"
    E_TOTP_REQUIRED = "E_TOTP_REQUIRED"
    E_INVALID_TOTP = "E_INVALID_TOTP"
    E_SESSION_STORE_FAILED = "E_SESSION_STORE_FAILED"

    # Tokens
    E_TOKEN_NOT_FOUND = "E_TOKEN_NOT_FOUND"
    E_TOKEN_EXPIRED = "E_TOKEN_EXPIRED"

    # Domain lookups
    E_USER_NOT_FOUND = "E_USER_NOT_FOUND"
    E_CHANNEL_NOT_FOUND = "E_CHANNEL_NOT_FOUND"
    E_STREAM_NOT_FOUND = "E_STREAM_NOT_FOUND"
    E_SESSION_NOT_FOUND = "E_SESSION_NOT_FOUND"
    E_SOCIAL_LINK_NOT_FOUND = "E_SOCIAL_LINK_NOT_FOUND"

    # Domain conflicts
    E_USERNAME_TAKEN = "E_USERNAME_TAKEN"
    E_EMAIL_TAKEN = "E_EMAIL_TAKEN"
    E_ALREADY_FOLLOWING = "E_ALREADY_FOLLOWING"
    E_NOT_FOLLOWING = "E_NOT_FOLLOWING"
    E_SELF_FOLLOW = "E_SELF_FOLLOW"

    # Chat / stream
    E_STREAM_OFFLINE = "E_STREAM_OFFLINE"
    E_CHAT_DISABLED = "E_CHAT_DISABLED"
    E_CHAT_FOLLOWERS_ONLY = "E_CHAT_FOLLOWERS_ONLY"

    # Integrations
    E_STORAGE_ERROR = "E_STORAGE_ERROR"
    E_MAIL_ERROR = "E_MAIL_ERROR"
    E_TELEGRAM_ERROR = "E_TELEGRAM_ERROR"
    E_LIVEKIT_UNKNOWN = "E_LIVEKIT_UNKNOWN"
    E_LIVEKIT_INVALID_ARGUMENT = "E_LIVEKIT_INVALID_ARGUMENT"
    E_LIVEKIT_NOT_FOUND = "E_LIVEKIT_NOT_FOUND"
    E_LIVEKIT_ALREADY_EXISTS = "E_LIVEKIT_ALREADY_EXISTS"
    E_LIVEKIT_PERMISSION_DENIED = "E_LIVEKIT_PERMISSION_DENIED"
    E_LIVEKIT_UNAUTHENTICATED = "E_LIVEKIT_UNAUTHENTICATED"
    E_LIVEKIT_RESOURCE_EXHAUSTED = "E_LIVEKIT_RESOURCE_EXHAUSTED"
    E_LIVEKIT_UNAVAILABLE = "E_LIVEKIT_UNAVAILABLE"
    E_LIVEKIT_INTERNAL = "E_LIVEKIT_INTERNAL"

    def __str__(self) -> str:
        return self.value


class HttpStatusCode(IntEnum):
    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    UNPROCESSABLE_ENTITY = 422
    INTERNAL_SERVER_ERROR = 500
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503


class AppError(Exception):
    """Typed application error.

    Carries the error code, a user-facing message and the HTTP status used when the
    error reaches the API layer. The raise location is captured for logging.
    """

    def __init__(
        self,
        errcode: AppErrorCode | str = AppErrorCode.E_INTERNAL_ERROR,
        errmesg: str = "We are sorry, an error occurred.",
        status_code: HttpStatusCode | int = HttpStatusCode.INTERNAL_SERVER_ERROR,
    ):
        self.errcode = errcode.value if isinstance(errcode, AppErrorCode) else str(errcode)
        self.errmesg = errmesg
        self.status_code = int(status_code)
        self.erresid = uuid4().hex[:10]
        self.caller_info = self._capture_caller()
        super().__init__(f"{self.errcode}: {errmesg}")

    @staticmethod
    def _capture_caller() -> str:
        frame = inspect.currentframe()
        try:
            # skip _capture_caller and __init__
            caller = frame.f_back.f_back if frame and frame.f_back else None
            if caller is None:
                return "unknown"
            module = caller.f_globals.get("__name__", caller.f_code.co_filename)
            return f"{module}:{caller.f_code.co_name}:{caller.f_lineno}"
        finally:
            del frame
