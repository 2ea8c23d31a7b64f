from pydantic import BaseModel, Field


class FollowIn(BaseModel):
    channel_id: str = Field(description="User id of the channel")


class FollowersCountOut(BaseModel):
    channel_id: str
    followers_count: int


class UnreadCountOut(BaseModel):
    count: int


class ChangeNotificationSettingsIn(BaseModel):
    site_notifications: bool
    telegram_notifications: bool


class SendMessageIn(BaseModel):
    stream_id: str
    text: str = Field(description="Message text, at most 500 characters")


class ChangeChatSettingsIn(BaseModel):
    is_chat_enabled: bool
    is_chat_followers_only: bool
