from fastapi import APIRouter, Depends

from app.api.v1.dependency import CurrentUser
from app.api.v1.schemas.base import ApiOut
from app.api.v1.schemas.community import ChangeNotificationSettingsIn, UnreadCountOut
from app.domain.notification.notification_domain import NotificationService
from app.domain.notification.notification_models import (
    NotificationResponse,
    NotificationSettingsParams,
    NotificationSettingsResponse,
)

router = APIRouter(prefix="/notification", tags=["Notification"])

_notification_service = NotificationService()


def get_notification_service() -> NotificationService:
    return _notification_service


@router.get("/find_unread_count")
async def find_unread_count(
    user: CurrentUser,
    service: NotificationService = Depends(get_notification_service),
) -> ApiOut[UnreadCountOut]:
    count = await service.find_unread_count(user)
    return ApiOut[UnreadCountOut](results=UnreadCountOut(count=count))


@router.get("/find_by_user")
async def find_by_user(
    user: CurrentUser,
    service: NotificationService = Depends(get_notification_service),
) -> ApiOut[list[NotificationResponse]]:
    """All notifications of the current user, newest first. Unread ones become read."""
    return ApiOut[list[NotificationResponse]](results=await service.find_by_user(user))


@router.post("/change_settings")
async def change_settings(
    body: ChangeNotificationSettingsIn,
    user: CurrentUser,
    service: NotificationService = Depends(get_notification_service),
) -> ApiOut[NotificationSettingsResponse]:
    """Returns a Telegram link token when Telegram is enabled but not linked yet."""
    result = await service.change_settings(user, NotificationSettingsParams(**body.model_dump()))
    return ApiOut[NotificationSettingsResponse](results=result)
