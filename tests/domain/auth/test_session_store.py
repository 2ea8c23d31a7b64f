"""Tests for the Redis session store and the cookie signer."""

import pytest
from itsdangerous import URLSafeTimedSerializer

from app.domain.auth.session_store import (
    SESSION_KEY,
    USER_SESSIONS_KEY,
    SessionCookieSigner,
    SessionMetadata,
    SessionStore,
)


class TestSessionStore:
    async def test_create_and_get(self, session_store: SessionStore, redis_client):
        record = await session_store.create("us_1", SessionMetadata(ip="10.0.0.1", user_agent="pytest"))

        loaded = await session_store.get(record.session_id)
        assert loaded is not None
        assert loaded.user_id == "us_1"
        assert loaded.metadata.ip == "10.0.0.1"

        ttl = await redis_client.ttl(SESSION_KEY.format(session_id=record.session_id))
        assert 0 < ttl <= 3600
        members = await redis_client.smembers(USER_SESSIONS_KEY.format(user_id="us_1"))
        assert record.session_id in members

    async def test_get_unknown(self, session_store: SessionStore):
        assert await session_store.get("missing") is None

    async def test_each_create_is_independent(self, session_store: SessionStore):
        first = await session_store.create("us_1")
        second = await session_store.create("us_1")

        assert first.session_id != second.session_id
        records = await session_store.list_for_user("us_1")
        assert {r.session_id for r in records} == {first.session_id, second.session_id}

    async def test_destroy(self, session_store: SessionStore):
        record = await session_store.create("us_1")

        assert await session_store.destroy(record.session_id) is True
        assert await session_store.get(record.session_id) is None
        assert await session_store.list_for_user("us_1") == []
        assert await session_store.destroy(record.session_id) is False

    async def test_list_prunes_expired_records(self, session_store: SessionStore, redis_client):
        kept = await session_store.create("us_1")
        gone = await session_store.create("us_1")
        await redis_client.delete(SESSION_KEY.format(session_id=gone.session_id))

        records = await session_store.list_for_user("us_1")

        assert [r.session_id for r in records] == [kept.session_id]
        members = await redis_client.smembers(USER_SESSIONS_KEY.format(user_id="us_1"))
        assert members == {kept.session_id}

    async def test_destroy_all_for_user(self, session_store: SessionStore):
        a = await session_store.create("us_1")
        b = await session_store.create("us_1")
        other = await session_store.create("us_2")

        assert await session_store.destroy_all_for_user("us_1") == 2

        assert await session_store.get(a.session_id) is None
        assert await session_store.get(b.session_id) is None
        assert await session_store.get(other.session_id) is not None


class TestSessionCookieSigner:
    def test_round_trip(self):
        signer = SessionCookieSigner("secret", max_age=60)
        assert signer.unsign(signer.sign("abc")) == "abc"

    def test_tampered_cookie(self):
        signer = SessionCookieSigner("secret", max_age=60)
        value = signer.sign("abc")
        assert signer.unsign(value[:-2] + "xx") is None

    def test_foreign_secret(self):
        foreign = URLSafeTimedSerializer("other-secret").dumps("abc")
        assert SessionCookieSigner("secret", max_age=60).unsign(foreign) is None

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_cookie(self, value):
        assert SessionCookieSigner("secret", max_age=60).unsign(value) is None
