"""End-to-end cookie session flow over the account and session routers."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.api.errors import app_error_handler, params_validation_error_handler
from app.api.v1.routers.account import get_account_service
from app.api.v1.routers.account import router as account_router
from app.api.v1.routers.session import router as session_router
from app.domain.auth.account_domain import AccountService
from app.domain.auth.session_store import SessionStore, get_session_store
from app.domain.auth.tokens import TokenIssuer
from app.schemas import Token, TokenType
from app.shared.api.utils import validation_exception_handler
from app.utils.app_errors import AppError
from tests.fixtures.user_fixtures import DEFAULT_PASSWORD, create_user

COOKIE_NAME = "session"


@pytest.fixture
def mock_mail() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def test_app(session_store: SessionStore, mock_mail: AsyncMock) -> FastAPI:
    """Create FastAPI test app with dependency overrides."""
    app = FastAPI()

    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_account_service] = lambda: AccountService(
        mail=mock_mail, tokens=TokenIssuer()
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ValidationError, params_validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]

    app.include_router(account_router)
    app.include_router(session_router)
    return app


@pytest_asyncio.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def _cookie_header(response: httpx.Response) -> dict[str, str]:
    value = response.cookies.get(COOKIE_NAME)
    assert value, "session cookie not set"
    return {"Cookie": f"{COOKIE_NAME}={value}"}


@pytest.mark.usefixtures("clear_collections")
class TestRegistration:
    async def test_register_verify_and_me(self, beanie_db, client: httpx.AsyncClient):
        response = await client.post(
            "/account/create_user",
            json={"username": "alice", "email": "alice@example.com", "password": DEFAULT_PASSWORD},
        )
        assert response.status_code == 200
        user_id = response.json()["results"]["user_id"]

        token = await Token.find_one(Token.user_id == user_id, Token.type == TokenType.EMAIL_VERIFY)
        assert token is not None

        response = await client.post("/account/verify_email", json={"token": token.token})
        assert response.status_code == 200
        assert response.json()["results"]["user"]["is_email_verified"] is True

        me = await client.get("/account/me", headers=_cookie_header(response))
        assert me.status_code == 200
        assert me.json()["results"]["username"] == "alice"
        assert "password" not in me.json()["results"]

    async def test_invalid_username_is_422(self, beanie_db, client: httpx.AsyncClient):
        response = await client.post(
            "/account/create_user",
            json={"username": "no spaces", "email": "alice@example.com", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == 422
        assert response.json()["success"] is False
        assert response.json()["errcode"] == "E_INVALID_PARAMS"


@pytest.mark.usefixtures("clear_collections")
class TestSessionCookie:
    async def test_login_me_logout(self, beanie_db, client: httpx.AsyncClient):
        await create_user("alice")

        response = await client.post("/session/login", json={"login": "alice", "password": DEFAULT_PASSWORD})
        assert response.status_code == 200
        set_cookie = response.headers["set-cookie"].lower()
        assert "httponly" in set_cookie
        assert "samesite=lax" in set_cookie
        headers = _cookie_header(response)

        me = await client.get("/account/me", headers=headers)
        assert me.status_code == 200

        current = await client.get("/session/find_current", headers=headers)
        assert current.status_code == 200

        logout = await client.post("/session/logout", headers=headers)
        assert logout.status_code == 200

        after = await client.get("/account/me", headers=headers)
        assert after.status_code == 401

    async def test_me_without_cookie(self, beanie_db, client: httpx.AsyncClient):
        response = await client.get("/account/me", headers={"Cookie": ""})

        assert response.status_code == 401
        assert response.json()["errcode"] == "E_UNAUTHORIZED"

    async def test_tampered_cookie(self, beanie_db, client: httpx.AsyncClient):
        response = await client.get("/account/me", headers={"Cookie": f"{COOKIE_NAME}=forged.value"})

        assert response.status_code == 401

    async def test_wrong_password(self, beanie_db, client: httpx.AsyncClient):
        await create_user("alice")

        response = await client.post("/session/login", json={"login": "alice", "password": "nope-nope"})

        assert response.status_code == 401
        assert COOKIE_NAME not in response.cookies

    async def test_two_logins_are_independent(self, beanie_db, client: httpx.AsyncClient):
        await create_user("alice")
        payload = {"login": "alice", "password": DEFAULT_PASSWORD}

        first = _cookie_header(await client.post("/session/login", json=payload))
        second = _cookie_header(await client.post("/session/login", json=payload))

        others = await client.get("/session/find_by_user", headers=first)
        assert len(others.json()["results"]) == 1

        await client.post("/session/logout", headers=second)
        assert (await client.get("/account/me", headers=first)).status_code == 200
