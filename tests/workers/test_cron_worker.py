"""Tests for the cron worker tasks."""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from app.domain.cron.cron_domain import CronService
from app.schemas import User
from app.schemas.schema_utils import utc_now
from tests.fixtures.user_fixtures import create_user


@pytest.fixture
def cron_service(session_store) -> CronService:
    return CronService(
        session_store=session_store,
        mail=AsyncMock(),
        telegram=AsyncMock(),
        storage=AsyncMock(),
        dispatcher=AsyncMock(),
    )


@pytest.mark.usefixtures("clear_collections")
class TestCronWorker:
    async def test_delete_deactivated_accounts_task(self, beanie_db, cron_service: CronService):
        from app.workers.cron_worker import delete_deactivated_accounts

        old = await create_user("old", is_deactivated=True, deactivated_at=utc_now() - timedelta(days=30))

        with patch("app.workers.cron_worker.get_cron_service", return_value=cron_service):
            # Act - call the underlying function directly via .fn
            result = await delete_deactivated_accounts.fn()

        assert result["deleted"] == 1
        assert result["notified"] == 1
        assert await User.find_one(User.user_id == old.user_id) is None

    async def test_notify_users_enable_two_factor_task(self, beanie_db, cron_service: CronService):
        from app.workers.cron_worker import notify_users_enable_two_factor

        await create_user("alice")
        await create_user("bob")

        with patch("app.workers.cron_worker.get_cron_service", return_value=cron_service):
            result = await notify_users_enable_two_factor.fn()

        assert result == {"nudged": 2}
