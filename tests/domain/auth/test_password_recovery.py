"""Tests for password recovery and two-factor enrolment."""

from unittest.mock import AsyncMock

import pyotp
import pytest

from app.domain.auth.password_recovery_domain import PasswordRecoveryService
from app.domain.auth.passwords import verify_password
from app.domain.auth.security_models import EnableTotpParams, NewPasswordParams, ResetPasswordParams
from app.domain.auth.session_store import SessionMetadata
from app.domain.auth.tokens import TokenIssuer
from app.domain.auth.totp_domain import TotpService
from app.schemas import Token, TokenType, User
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode
from tests.fixtures.user_fixtures import create_user


@pytest.fixture
def mock_mail() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_telegram() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(mock_mail: AsyncMock, mock_telegram: AsyncMock) -> PasswordRecoveryService:
    return PasswordRecoveryService(mail=mock_mail, telegram=mock_telegram, tokens=TokenIssuer())


@pytest.mark.usefixtures("clear_collections")
class TestResetPassword:
    async def test_reset_password_mails_token(
        self, beanie_db, service: PasswordRecoveryService, mock_mail: AsyncMock, mock_telegram: AsyncMock
    ):
        user = await create_user("alice")

        await service.reset_password(
            ResetPasswordParams(email="alice@example.com"),
            SessionMetadata(ip="10.0.0.1", user_agent="pytest"),
        )

        token = await Token.find_one(Token.user_id == user.user_id)
        assert token is not None and token.type == TokenType.PASSWORD_RESET
        mock_mail.send_password_reset_token.assert_awaited_once_with(
            "alice@example.com", token.token, {"ip": "10.0.0.1", "user_agent": "pytest"}
        )
        mock_telegram.send_password_reset_token.assert_not_awaited()

    async def test_reset_password_with_telegram_disabled(
        self, beanie_db, service: PasswordRecoveryService, mock_telegram: AsyncMock
    ):
        await create_user(
            "alice",
            telegram_id="4242",
            notification_settings={"site_notifications": True, "telegram_notifications": False},
        )

        await service.reset_password(ResetPasswordParams(email="alice@example.com"))

        mock_telegram.send_password_reset_token.assert_not_awaited()

    async def test_reset_password_unknown_email(self, beanie_db, service: PasswordRecoveryService):
        with pytest.raises(AppError) as exc_info:
            await service.reset_password(ResetPasswordParams(email="nobody@example.com"))

        assert exc_info.value.status_code == HttpStatusCode.NOT_FOUND

    async def test_new_password(self, beanie_db, service: PasswordRecoveryService):
        user = await create_user("alice")
        token = await TokenIssuer().issue(user, TokenType.PASSWORD_RESET)

        await service.new_password(
            NewPasswordParams(password="fresh-password", password_repeat="fresh-password", token=token.token)
        )

        saved = await User.find_one(User.user_id == user.user_id)
        assert saved is not None
        assert verify_password(saved.password, "fresh-password")

    async def test_new_password_mismatch(self, beanie_db, service: PasswordRecoveryService):
        user = await create_user("alice")
        token = await TokenIssuer().issue(user, TokenType.PASSWORD_RESET)

        with pytest.raises(AppError) as exc_info:
            await service.new_password(
                NewPasswordParams(password="fresh-password", password_repeat="other-password", token=token.token)
            )

        assert exc_info.value.status_code == HttpStatusCode.BAD_REQUEST
        # token untouched
        assert await Token.find_one(Token.token == token.token) is not None


@pytest.mark.usefixtures("clear_collections")
class TestTotpEnrolment:
    async def test_generate_does_not_store(self, beanie_db):
        user = await create_user("alice")

        provisioning = await TotpService().generate(user)

        assert provisioning.uri.startswith("otpauth://totp/")
        saved = await User.find_one(User.user_id == user.user_id)
        assert saved is not None and saved.totp_secret is None

    async def test_enable_with_valid_pin(self, beanie_db):
        user = await create_user("alice")
        secret = pyotp.random_base32()

        await TotpService().enable(user, EnableTotpParams(secret=secret, pin=pyotp.TOTP(secret).now()))

        saved = await User.find_one(User.user_id == user.user_id)
        assert saved is not None
        assert saved.is_totp_enabled is True
        assert saved.totp_secret == secret

    async def test_enable_with_invalid_pin(self, beanie_db):
        user = await create_user("alice")

        with pytest.raises(AppError) as exc_info:
            await TotpService().enable(user, EnableTotpParams(secret=pyotp.random_base32(), pin="abc"))

        assert exc_info.value.errcode == AppErrorCode.E_INVALID_TOTP

    async def test_disable(self, beanie_db):
        user = await create_user("alice", is_totp_enabled=True, totp_secret=pyotp.random_base32())

        await TotpService().disable(user)

        saved = await User.find_one(User.user_id == user.user_id)
        assert saved is not None
        assert saved.is_totp_enabled is False
        assert saved.totp_secret is None
