"""
Simple Redis client manager that creates and tracks clients.
"""

import threading

from loguru import logger
from redis.asyncio import Redis

from ..config import config
from .utils import hide_password, label_from_env_var


class RedisManager:
    """
    Simple Redis client manager.

    Connection strings come from `REDIS_URL_<LABEL>` entries; the default label falls back
    to REDIS_URL and then to a local server. A `mode=cluster` query parameter selects a
    cluster client.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if hasattr(self, "_initialized"):
            return

        self._clients: dict[str, Redis] = {}
        self._connection_strings: dict[str, str] = {}
        self._lock = threading.Lock()

        self._load_connection_strings()

        self._initialized = True

    def _load_connection_strings(self):
        for key, value in config.items():
            label = label_from_env_var(key, "REDIS")
            if label is None or not value:
                continue
            self._connection_strings[label] = value
            logger.info("Loaded Redis connection string for label '{}': {}", label, hide_password(value))

        if "default" not in self._connection_strings:
            default_url = config.get_redis_url("default")
            self._connection_strings["default"] = default_url
            logger.info("Using default Redis connection string: {}", hide_password(default_url))

    @staticmethod
    def _split_mode(connection_string: str) -> tuple[str, str]:
        """Return (url without mode param, mode)."""
        base, _, query = connection_string.partition("?")
        params = [p for p in query.split("&") if p]
        mode = "cluster" if "cluster" in base else "standalone"
        kept = []
        for param in params:
            if param.startswith("mode="):
                mode = param.split("=", 1)[1] or mode
            else:
                kept.append(param)
        return (f"{base}?{'&'.join(kept)}" if kept else base), mode

    def get_cache_client(self, label: str | None = None) -> Redis:
        """
        Get Redis client by label.

        Raises:
            ValueError: If label not found
        """
        label = label or "default"

        with self._lock:
            if label not in self._clients:
                if label not in self._connection_strings:
                    raise ValueError(f"No Redis connection string found for label '{label}'")

                url, mode = self._split_mode(self._connection_strings[label])
                logger.info("Open Redis client for label '{}' (mode: {})", label, mode)
                if mode == "cluster":
                    from redis.asyncio.cluster import RedisCluster

                    self._clients[label] = RedisCluster.from_url(url, decode_responses=True)  # type: ignore[assignment]
                else:
                    self._clients[label] = Redis.from_url(url, decode_responses=True)

            return self._clients[label]

    def get_connection_string(self, label: str | None = None) -> str:
        label = label or "default"
        url, _ = self._split_mode(self._connection_strings[label])
        return url

    async def close_all(self):
        with self._lock:
            clients = list(self._clients.items())
            self._clients.clear()
        for label, client in clients:
            logger.info("Close Redis client for label '{}'", label)
            try:
                await client.aclose()
            except Exception as e:
                logger.warning("Error closing Redis client '{}': {}", label, e)


def get_redis_manager() -> RedisManager:
    return RedisManager()


def get_redis_client(label: str | None = None) -> Redis:
    return get_redis_manager().get_cache_client(label)
