"""Streaq worker for scheduled account maintenance.

Run with:
    streaq app.workers.cron_worker:worker
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any

from loguru import logger
from streaq import Worker

from app.app_config import get_app_environ_config
from app.domain.auth.session_store import SessionStore
from app.domain.cron.cron_domain import CronService
from app.schemas.init_schemas import init_schema
from app.shared.api.utils import init_logger
from app.shared.config import config
from app.shared.storage.redis import get_redis_client, get_redis_manager

QUEUE_KEY = "streamhub:streaq"
QUEUE_KEY_CRON = f"{QUEUE_KEY}:cron"


@asynccontextmanager
async def cron_lifespan() -> AsyncIterator[None]:
    """Lifespan context manager for the cron worker."""
    init_logger()
    logger.info("Starting cron worker")
    await init_schema()
    logger.info("Cron worker initialized")

    try:
        yield
    finally:
        await get_redis_manager().close_all()
        logger.info("Cron worker stopped")


worker: Worker[None] = Worker(
    redis_url=config.get_redis_url("default"),
    lifespan=cron_lifespan,  # type: ignore[arg-type]
    queue_name=QUEUE_KEY_CRON,
)


def get_cron_service() -> CronService:
    store = SessionStore(get_redis_client("default"), get_app_environ_config().SESSION_MAX_AGE_SECONDS)
    return CronService(session_store=store)


@worker.cron("0 1 * * *", timeout=timedelta(hours=1))
async def delete_deactivated_accounts() -> dict[str, Any]:
    """Daily at 01:00: hard-delete accounts past the deactivation retention window."""
    result = await get_cron_service().delete_deactivated_accounts()
    logger.info(
        f"Deactivated account sweep done: cutoff={result.cutoff.isoformat()} "
        f"deleted={len(result.deleted_user_ids)} notified={result.notified}"
    )
    return {
        "cutoff": result.cutoff.isoformat(),
        "deleted": len(result.deleted_user_ids),
        "notified": result.notified,
    }


@worker.cron("0 10 * * 1", timeout=timedelta(hours=1))
async def notify_users_enable_two_factor() -> dict[str, Any]:
    """Mondays at 10:00: remind accounts without two-factor to enable it."""
    nudged = await get_cron_service().notify_users_enable_two_factor()
    return {"nudged": nudged}
