"""Token issuer: single-use, typed, time-limited tokens."""

import secrets
from datetime import timedelta

from loguru import logger
from pymongo.errors import DuplicateKeyError

from app.schemas import Token, TokenType, User
from app.schemas.schema_utils import utc_now
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

DEFAULT_EXPIRY: dict[TokenType, timedelta] = {
    TokenType.EMAIL_VERIFY: timedelta(hours=24),
    TokenType.PASSWORD_RESET: timedelta(minutes=30),
    TokenType.DEACTIVATE_ACCOUNT: timedelta(minutes=5),
    TokenType.TELEGRAM_AUTH: timedelta(minutes=10),
}

_ISSUE_ATTEMPTS = 5


def _new_token_value(token_type: TokenType) -> str:
    if token_type == TokenType.DEACTIVATE_ACCOUNT:
        return f"{secrets.randbelow(1_000_000):06d}"
    return secrets.token_urlsafe(32)


class TokenIssuer:
    """Creates and consumes `Token` rows.

    Issuing a token replaces any outstanding token of the same type for the same user.
    Consuming a token is an atomic conditional delete, so of two concurrent consumers
    only one gets the user back.
    """

    async def issue(
        self,
        user: User,
        token_type: TokenType,
        expiry: timedelta | None = None,
    ) -> Token:
        expiry = expiry if expiry is not None else DEFAULT_EXPIRY[token_type]

        await Token.find(Token.user_id == user.user_id, Token.type == token_type).delete()

        for attempt in range(_ISSUE_ATTEMPTS):
            token = Token(
                token=_new_token_value(token_type),
                type=token_type,
                user_id=user.user_id,
                expires_in=utc_now() + expiry,
            )
            try:
                await token.insert()
            except DuplicateKeyError:
                logger.debug(f"Token collision for type={token_type.value}, attempt={attempt + 1}")
                continue
            logger.debug(f"Issued {token_type.value} token for user_id={user.user_id}")
            return token

        raise AppError(
            errcode=AppErrorCode.E_INTERNAL_ERROR,
            errmesg="Could not issue token",
            status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
        )

    async def validate(self, token: str, token_type: TokenType, user_id: str | None = None) -> User:
        """Consume a token and return its owner.

        With `user_id` set, a token owned by anyone else is treated as missing and left in place.

        Raises:
            AppError 404 E_TOKEN_NOT_FOUND: no such token, or it was consumed concurrently
            AppError 400 E_TOKEN_EXPIRED: token past its expiry; the row is removed
        """
        criteria = [Token.token == token, Token.type == token_type]
        if user_id is not None:
            criteria.append(Token.user_id == user_id)

        existing = await Token.find_one(*criteria)
        if existing is None:
            raise AppError(
                errcode=AppErrorCode.E_TOKEN_NOT_FOUND,
                errmesg="Token not found",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        if utc_now() > existing.expires_in:
            await Token.find_one(Token.id == existing.id).delete()
            logger.info(f"Rejected expired {token_type.value} token for user_id={existing.user_id}")
            raise AppError(
                errcode=AppErrorCode.E_TOKEN_EXPIRED,
                errmesg="Token has expired",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        result = await Token.find_one(Token.id == existing.id, Token.user_id == existing.user_id).delete()
        if result is None or result.deleted_count == 0:
            raise AppError(
                errcode=AppErrorCode.E_TOKEN_NOT_FOUND,
                errmesg="Token not found",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        user = await User.find_one(User.user_id == existing.user_id)
        if user is None:
            raise AppError(
                errcode=AppErrorCode.E_USER_NOT_FOUND,
                errmesg="User not found",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return user


token_issuer = TokenIssuer()
