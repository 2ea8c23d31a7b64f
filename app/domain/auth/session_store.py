"""Server-side session store on Redis plus the signed cookie codec.

Layout:
    session:{session_id}      JSON {session_id, user_id, created_at, metadata}
    user_sessions:{user_id}   SET of session ids owned by the user

Both keys expire after the configured session max age. The cookie only carries the
session id signed with itsdangerous; the record itself never leaves the server.
"""

import secrets
from datetime import datetime
from typing import Any

import orjson
from fastapi import Depends
from itsdangerous import BadSignature, URLSafeTimedSerializer
from loguru import logger
from pydantic import BaseModel, Field
from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.app_config import get_app_environ_config
from app.schemas.schema_utils import utc_now
from app.shared.api.utils import get_redis_major_client
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

SESSION_KEY = "session:{session_id}"
USER_SESSIONS_KEY = "user_sessions:{user_id}"
COOKIE_SALT = "streamhub.session.v1"


class SessionMetadata(BaseModel):
    ip: str | None = None
    user_agent: str | None = None


class SessionRecord(BaseModel):
    session_id: str
    user_id: str
    created_at: datetime = Field(default_factory=utc_now)
    metadata: SessionMetadata = Field(default_factory=SessionMetadata)


class SessionCookieSigner:
    def __init__(self, secret: str, max_age: int):
        self._serializer = URLSafeTimedSerializer(secret_key=secret, salt=COOKIE_SALT)
        self._max_age = max_age

    def sign(self, session_id: str) -> str:
        return self._serializer.dumps(session_id)

    def unsign(self, cookie_value: str | None) -> str | None:
        if not cookie_value:
            return None
        try:
            value = self._serializer.loads(cookie_value, max_age=self._max_age)
        except BadSignature:
            # BadTimeSignature and SignatureExpired are subclasses
            return None
        return value if isinstance(value, str) and value else None


def get_cookie_signer() -> SessionCookieSigner:
    cfg = get_app_environ_config()
    return SessionCookieSigner(cfg.SESSION_SECRET, cfg.SESSION_MAX_AGE_SECONDS)


class SessionStore:
    """Session lifecycle on Redis: create, get, destroy, list per user."""

    def __init__(self, redis_client: Redis, ttl_seconds: int):
        self._redis = redis_client
        self._ttl = ttl_seconds

    async def create(self, user_id: str, metadata: SessionMetadata | None = None) -> SessionRecord:
        record = SessionRecord(
            session_id=secrets.token_urlsafe(32),
            user_id=user_id,
            metadata=metadata or SessionMetadata(),
        )
        session_key = SESSION_KEY.format(session_id=record.session_id)
        user_key = USER_SESSIONS_KEY.format(user_id=user_id)
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.set(session_key, orjson.dumps(record.model_dump(mode="json")), ex=self._ttl)
                pipe.sadd(user_key, record.session_id)
                pipe.expire(user_key, self._ttl)
                await pipe.execute()
        except RedisError as e:
            logger.error(f"Failed to store session for user_id={user_id}: {e}")
            raise AppError(
                errcode=AppErrorCode.E_SESSION_STORE_FAILED,
                errmesg="Could not save session",
                status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
            ) from e

        logger.debug(f"Created session for user_id={user_id}")
        return record

    async def get(self, session_id: str) -> SessionRecord | None:
        raw = await self._redis.get(SESSION_KEY.format(session_id=session_id))
        if not raw:
            return None
        return SessionRecord.model_validate(orjson.loads(raw))

    async def destroy(self, session_id: str) -> bool:
        record = await self.get(session_id)
        if record is None:
            return False
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.delete(SESSION_KEY.format(session_id=session_id))
            pipe.srem(USER_SESSIONS_KEY.format(user_id=record.user_id), session_id)
            await pipe.execute()
        logger.debug(f"Destroyed session for user_id={record.user_id}")
        return True

    async def list_for_user(self, user_id: str) -> list[SessionRecord]:
        """Return live sessions of a user, newest first. Prunes ids whose record expired."""
        user_key = USER_SESSIONS_KEY.format(user_id=user_id)
        session_ids: set[str] = await self._redis.smembers(user_key)  # type: ignore[misc]

        records: list[SessionRecord] = []
        stale: list[str] = []
        for session_id in session_ids:
            record = await self.get(session_id)
            if record is None:
                stale.append(session_id)
            else:
                records.append(record)

        if stale:
            await self._redis.srem(user_key, *stale)  # type: ignore[misc]

        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    async def destroy_all_for_user(self, user_id: str) -> int:
        user_key = USER_SESSIONS_KEY.format(user_id=user_id)
        session_ids: set[str] = await self._redis.smembers(user_key)  # type: ignore[misc]
        keys: list[Any] = [SESSION_KEY.format(session_id=sid) for sid in session_ids]
        await self._redis.delete(*keys, user_key)
        return len(session_ids)


def get_session_store(redis_client: Redis = Depends(get_redis_major_client)) -> SessionStore:
    return SessionStore(redis_client, get_app_environ_config().SESSION_MAX_AGE_SECONDS)
