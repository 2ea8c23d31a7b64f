"""Scheduled maintenance jobs run by the cron worker."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from loguru import logger

from app.app_config import get_app_environ_config
from app.domain.auth.session_store import SessionStore
from app.domain.notification.dispatcher import NotificationDispatcher, notification_dispatcher
from app.schemas import (
    ChatMessage,
    Follow,
    Notification,
    NotificationType,
    SocialLink,
    Stream,
    Token,
    User,
)
from app.schemas.schema_utils import utc_now
from app.services.integrations.mail_service import MailService, mail_service
from app.services.integrations.s3_storage import StorageService, storage_service
from app.services.integrations.telegram_service import TelegramService, telegram_service
from app.utils.app_errors import AppError


@dataclass
class SweepResult:
    cutoff: datetime
    deleted_user_ids: list[str] = field(default_factory=list)
    notified: int = 0


class CronService:
    def __init__(
        self,
        session_store: SessionStore | None = None,
        mail: MailService | None = None,
        telegram: TelegramService | None = None,
        storage: StorageService | None = None,
        dispatcher: NotificationDispatcher | None = None,
    ):
        self._sessions = session_store
        self._mail = mail or mail_service
        self._telegram = telegram or telegram_service
        self._storage = storage or storage_service
        self._dispatcher = dispatcher or notification_dispatcher

    async def delete_deactivated_accounts(self, now: datetime | None = None) -> SweepResult:
        """Hard-delete accounts deactivated before the retention cutoff.

        Accounts are fetched first, then deleted together with everything they own, then
        their owners are told by mail and Telegram. Media is removed from storage last.
        """
        retention = timedelta(days=get_app_environ_config().DEACTIVATED_RETENTION_DAYS)
        result = SweepResult(cutoff=(now or utc_now()) - retention)

        users = await User.find(
            User.is_deactivated == True,  # noqa: E712
            User.deactivated_at <= result.cutoff,  # type: ignore[operator]
        ).to_list()
        if not users:
            logger.info(f"No deactivated accounts older than {result.cutoff.isoformat()}")
            return result

        user_ids = [u.user_id for u in users]
        streams = {s.user_id: s for s in await Stream.find({"user_id": {"$in": user_ids}}).to_list()}

        await self._delete_owned_data(user_ids, [s.stream_id for s in streams.values()])
        await User.find({"user_id": {"$in": user_ids}}).delete()
        result.deleted_user_ids = user_ids
        logger.info(f"Deleted {len(user_ids)} deactivated account(s)")

        for user in users:
            if await self._notify_deleted(user):
                result.notified += 1

            await self._remove_media(user, streams.get(user.user_id))

        return result

    async def _delete_owned_data(self, user_ids: list[str], stream_ids: list[str]) -> None:
        await Token.find({"user_id": {"$in": user_ids}}).delete()
        await Follow.find(
            {"$or": [{"follower_id": {"$in": user_ids}}, {"following_id": {"$in": user_ids}}]}
        ).delete()
        await Notification.find({"user_id": {"$in": user_ids}}).delete()
        await SocialLink.find({"user_id": {"$in": user_ids}}).delete()
        await ChatMessage.find(
            {"$or": [{"user_id": {"$in": user_ids}}, {"stream_id": {"$in": stream_ids}}]}
        ).delete()
        await Stream.find({"user_id": {"$in": user_ids}}).delete()

        if self._sessions is not None:
            for user_id in user_ids:
                await self._sessions.destroy_all_for_user(user_id)

    async def _notify_deleted(self, user: User) -> bool:
        try:
            await self._mail.send_account_deletion(user.email)
            if user.notification_settings.telegram_notifications and user.telegram_id:
                await self._telegram.send_account_deletion(user.telegram_id)
        except AppError as e:
            logger.error(f"Account deletion notice for user_id={user.user_id} failed: {e.errmesg}")
            return False
        return True

    async def _remove_media(self, user: User, stream: Stream | None) -> None:
        keys = [user.avatar, stream.thumbnail_url if stream else None]
        for key in filter(None, keys):
            try:
                await self._storage.remove(key)
            except AppError as e:
                logger.error(f"Media removal {key} for user_id={user.user_id} failed: {e.errmesg}")

    async def notify_users_enable_two_factor(self) -> int:
        """Nudge active accounts without two-factor to enable it. Returns the number nudged."""
        users = await User.find(
            User.is_totp_enabled == False,  # noqa: E712
            User.is_deactivated == False,  # noqa: E712
        ).to_list()

        nudged = 0
        for user in users:
            try:
                await self._mail.send_enable_two_factor(user.email)
            except AppError as e:
                logger.error(f"Two-factor reminder mail for user_id={user.user_id} failed: {e.errmesg}")
            await self._dispatcher.dispatch(NotificationType.ENABLE_TWO_FACTOR, user)
            nudged += 1

        logger.info(f"Sent two-factor reminders to {nudged} user(s)")
        return nudged
