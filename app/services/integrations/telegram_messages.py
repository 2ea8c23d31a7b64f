"""Telegram message bodies (parse_mode=HTML)."""

from html import escape
from typing import Any

from app.app_config import get_app_environ_config


def _site() -> str:
    return get_app_environ_config().FRONTEND_BASE_URL


def _channel_link(username: str, label: str) -> str:
    return f'<a href="{_site()}/{escape(username)}">{escape(label)}</a>'


def _request_info(metadata: dict[str, Any]) -> str:
    return (
        "🖥️ <b>Request info:</b>\n"
        f"💻 <b>IP address:</b> {escape(str(metadata.get('ip') or 'unknown'))}\n"
        f"🌐 <b>Device:</b> {escape(str(metadata.get('user_agent') or 'unknown'))}\n\n"
    )


WELCOME = (
    "<b>👋 Welcome to the StreamHub bot!</b>\n\n"
    "Link your Telegram account to receive notifications. "
    "Open <b>Notifications</b> in your account settings to finish the setup."
)
AUTH_SUCCESS = "🎉 Your Telegram account is now linked to StreamHub!"
INVALID_TOKEN = "❌ Invalid or expired token."
NOT_LINKED = "Your Telegram account is not linked yet. Use the link from your notification settings."
UNKNOWN_COMMAND = "Unknown command. Try /me."

ACCOUNT_DELETED = (
    "<b>⚠️ Your account was permanently deleted.</b>\n\n"
    "All of your data has been removed and you will no longer receive notifications."
)


def profile(username: str, email: str, bio: str | None, followers_count: int) -> str:
    return (
        "<b>👤 Profile</b>\n\n"
        f"Username: <b>{escape(username)}</b>\n"
        f"Email: <b>{escape(email)}</b>\n"
        f"Followers: <b>{followers_count}</b>\n"
        f"About: <b>{escape(bio or 'Not set')}</b>"
    )


def reset_password(token: str, metadata: dict[str, Any]) -> str:
    return (
        "<b>🔒 Password reset</b>\n\n"
        "You requested a password reset for your account.\n\n"
        f'<b><a href="{_site()}/account/recovery/{escape(token)}">Reset password</a></b>\n\n'
        f"{_request_info(metadata)}"
        "If this was not you, ignore this message."
    )


def deactivate(token: str, metadata: dict[str, Any]) -> str:
    return (
        "<b>⚠️ Account deactivation request</b>\n\n"
        f"<b>Confirmation code: {escape(token)}</b>\n\n"
        f"{_request_info(metadata)}"
        "If you changed your mind, ignore this message and your account stays active."
    )


def stream_start(channel_username: str, channel_display_name: str) -> str:
    return (
        f"<b>📡 {escape(channel_display_name)} just went live!</b>\n\n"
        f"Watch here: {_channel_link(channel_username, 'open stream')}"
    )


def new_follower(follower_username: str, follower_display_name: str, followers_count: int) -> str:
    return (
        "<b>You have a new follower!</b>\n\n"
        f"{_channel_link(follower_username, follower_display_name)} followed you.\n\n"
        f"Total followers: {followers_count}"
    )


def new_sponsorship(plan_title: str, sponsor_username: str, sponsor_display_name: str) -> str:
    return (
        "<b>🎉 New sponsorship!</b>\n\n"
        f"Plan: <b>{escape(plan_title)}</b>\n"
        f"Sponsor: {_channel_link(sponsor_username, sponsor_display_name)}"
    )


def enable_two_factor() -> str:
    return (
        "🔐 Protect your account!\n\n"
        f'Enable two-factor authentication in your <a href="{_site()}/dashboard/settings">account settings</a>.'
    )
