"""Beanie ODM schemas for MongoDB collections."""

from .chat_message import ChatMessage
from .follow import Follow
from .init import DOCUMENT_MODELS, init_beanie_odm
from .notification import Notification, NotificationType
from .social_link import SocialLink
from .stream import Stream
from .token import Token, TokenType
from .user import NotificationSettings, User

__all__ = [
    "DOCUMENT_MODELS",
    "ChatMessage",
    "Follow",
    "Notification",
    "NotificationSettings",
    "NotificationType",
    "SocialLink",
    "Stream",
    "Token",
    "TokenType",
    "User",
    "init_beanie_odm",
]
