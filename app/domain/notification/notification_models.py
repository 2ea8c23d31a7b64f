"""Notification domain models."""

from datetime import datetime

from pydantic import BaseModel

from app.schemas import NotificationType


class NotificationResponse(BaseModel):
    notification_id: str
    type: NotificationType
    message: str
    is_read: bool
    created_at: datetime


class NotificationSettingsParams(BaseModel):
    site_notifications: bool
    telegram_notifications: bool


class NotificationSettingsResponse(BaseModel):
    site_notifications: bool
    telegram_notifications: bool
    telegram_auth_token: str | None = None
