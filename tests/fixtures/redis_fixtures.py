"""Redis fixtures for testing."""

from collections.abc import AsyncGenerator

import pytest_asyncio
from fakeredis import FakeAsyncRedis
from redis.asyncio import Redis

from app.domain.auth.session_store import SessionStore


@pytest_asyncio.fixture(scope="function")
async def redis_client() -> AsyncGenerator[Redis]:
    """
    Create an in-memory Redis client for testing.

    Every test gets its own fakeredis server, so no flush is needed between tests.
    """
    client: Redis = FakeAsyncRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def session_store(redis_client: Redis) -> SessionStore:
    """Session store backed by the in-memory Redis client."""
    return SessionStore(redis_client, ttl_seconds=3600)
