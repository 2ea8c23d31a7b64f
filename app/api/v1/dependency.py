from typing import Annotated

from fastapi import Depends, Request, Response, WebSocket
from loguru import logger
from redis.asyncio import Redis

from app.app_config import get_app_environ_config
from app.domain.auth.session_store import (
    SessionCookieSigner,
    SessionMetadata,
    SessionRecord,
    SessionStore,
    get_cookie_signer,
    get_session_store,
)
from app.schemas import User
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


def _unauthorized() -> AppError:
    return AppError(
        errcode=AppErrorCode.E_UNAUTHORIZED,
        errmesg="Not authenticated",
        status_code=HttpStatusCode.UNAUTHORIZED,
    )


def get_session_metadata(request: Request) -> SessionMetadata:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    else:
        ip = request.client.host if request.client else None
    return SessionMetadata(ip=ip, user_agent=request.headers.get("user-agent"))


def set_session_cookie(response: Response, record: SessionRecord, signer: SessionCookieSigner) -> None:
    cfg = get_app_environ_config()
    response.set_cookie(
        key=cfg.SESSION_COOKIE_NAME,
        value=signer.sign(record.session_id),
        max_age=cfg.SESSION_MAX_AGE_SECONDS,
        domain=cfg.SESSION_COOKIE_DOMAIN,
        secure=cfg.SESSION_COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    cfg = get_app_environ_config()
    response.delete_cookie(key=cfg.SESSION_COOKIE_NAME, domain=cfg.SESSION_COOKIE_DOMAIN)


async def _resolve_session(
    request: Request, store: SessionStore, signer: SessionCookieSigner
) -> SessionRecord | None:
    # Do not log the cookie value.
    session_id = signer.unsign(request.cookies.get(get_app_environ_config().SESSION_COOKIE_NAME))
    if not session_id:
        return None
    return await store.get(session_id)


async def get_current_session(
    request: Request,
    store: SessionStore = Depends(get_session_store),
    signer: SessionCookieSigner = Depends(get_cookie_signer),
) -> SessionRecord:
    record = await _resolve_session(request, store, signer)
    if record is None:
        raise _unauthorized()
    return record


async def get_current_user(session: SessionRecord = Depends(get_current_session)) -> User:
    user = await User.find_one(User.user_id == session.user_id)
    if user is None:
        logger.warning("Session refers to missing user_id: {}", session.user_id)
        raise _unauthorized()

    logger.debug("Authenticated user_id: {}", user.user_id)
    return user


async def get_optional_user(
    request: Request,
    store: SessionStore = Depends(get_session_store),
    signer: SessionCookieSigner = Depends(get_cookie_signer),
) -> User | None:
    record = await _resolve_session(request, store, signer)
    if record is None:
        return None
    return await User.find_one(User.user_id == record.user_id)


CurrentSession = Annotated[SessionRecord, Depends(get_current_session)]
CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
CookieSigner = Annotated[SessionCookieSigner, Depends(get_cookie_signer)]
Metadata = Annotated[SessionMetadata, Depends(get_session_metadata)]


def get_ws_redis_client(websocket: WebSocket) -> Redis:
    return websocket.app.state.redis_manager.get_cache_client("default")
