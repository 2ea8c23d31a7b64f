"""
Simple MongoDB client manager that creates and tracks clients.
"""

import atexit
import threading

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorClient

from ..config import config
from .utils import hide_password, label_from_env_var


class MongoManager:
    """
    Simple MongoDB client manager.

    Connection strings come from `MONGO_URL_<LABEL>` entries; the default label falls back
    to MONGO_URL and then to a local server. Clients are created lazily, one per label,
    and closed on process exit.
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

        self._clients: dict[str, AsyncIOMotorClient] = {}
        self._connection_strings: dict[str, str] = {}
        self._lock = threading.Lock()

        self._load_connection_strings()
        atexit.register(self.close_all)

        self._initialized = True

    def _load_connection_strings(self):
        for key, value in config.items():
            label = label_from_env_var(key, "MONGO")
            if label is None or not value:
                continue
            if label in self._connection_strings:
                logger.warning(
                    "MongoDB connection string for label '{}' already exists, '{}' will override it",
                    label,
                    key,
                )
            self._connection_strings[label] = value
            logger.info("Loaded MongoDB connection string for label '{}': {}", label, hide_password(value))

        if "default" not in self._connection_strings:
            default_url = config.get_mongo_url("default")
            self._connection_strings["default"] = default_url
            logger.info("Using default MongoDB connection string: {}", hide_password(default_url))

    def get_client(self, label: str | None = None) -> AsyncIOMotorClient:
        """
        Get MongoDB client by label.

        Raises:
            ValueError: If label not found
        """
        label = label or "default"

        with self._lock:
            if label not in self._clients:
                if label not in self._connection_strings:
                    raise ValueError(f"No MongoDB connection string found for label '{label}'")

                logger.info("Open MongoDB client for label '{}'", label)
                self._clients[label] = AsyncIOMotorClient(
                    self._connection_strings[label],
                    serverSelectionTimeoutMS=config.get_mongo_server_selection_timeout(),
                    connectTimeoutMS=config.get_mongo_connect_timeout(),
                    socketTimeoutMS=config.get_mongo_socket_timeout(),
                    maxPoolSize=config.get_mongo_max_pool_size(),
                    tz_aware=True,
                )

            return self._clients[label]

    def get_connection_info(self) -> dict[str, str]:
        return {label: hide_password(url) for label, url in self._connection_strings.items()}

    def close_all(self):
        with self._lock:
            for label, client in self._clients.items():
                logger.info("Close MongoDB client for label '{}'", label)
                client.close()
            self._clients.clear()


def get_mongo_manager() -> MongoManager:
    return MongoManager()


def get_mongo_client(label: str | None = None) -> AsyncIOMotorClient:
    return get_mongo_manager().get_client(label)
