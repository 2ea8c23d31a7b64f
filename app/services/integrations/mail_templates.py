"""HTML bodies for transactional mail."""

from collections.abc import Callable
from enum import Enum
from html import escape
from typing import Any

from app.app_config import get_app_environ_config


class MailTemplate(str, Enum):
    VERIFICATION = "verification"
    PASSWORD_RECOVERY = "password_recovery"
    DEACTIVATE = "deactivate"
    ACCOUNT_DELETION = "account_deletion"
    ENABLE_TWO_FACTOR = "enable_two_factor"


def _layout(title: str, body: str) -> str:
    return (
        "<!doctype html><html><body style=\"font-family:Arial,sans-serif;color:#111\">"
        f"<h2>{escape(title)}</h2>{body}"
        "<p style=\"color:#666;font-size:12px\">If you did not request this, ignore this message.</p>"
        "</body></html>"
    )


def _request_info(data: dict[str, Any]) -> str:
    metadata = data.get("metadata") or {}
    ip = escape(str(metadata.get("ip") or "unknown"))
    agent = escape(str(metadata.get("user_agent") or "unknown"))
    return f"<ul><li>IP address: {ip}</li><li>Device: {agent}</li></ul>"


def _verification(data: dict[str, Any]) -> tuple[str, str]:
    link = f"{get_app_environ_config().FRONTEND_BASE_URL}/account/verify?token={escape(data['token'])}"
    return "Verify your email", _layout(
        "Verify your email",
        f"<p>Thanks for signing up. Confirm your address:</p><p><a href=\"{link}\">Verify email</a></p>",
    )


def _password_recovery(data: dict[str, Any]) -> tuple[str, str]:
    link = f"{get_app_environ_config().FRONTEND_BASE_URL}/account/recovery/{escape(data['token'])}"
    return "Password reset", _layout(
        "Password reset",
        f"<p>Follow the link to choose a new password:</p><p><a href=\"{link}\">Reset password</a></p>"
        f"{_request_info(data)}",
    )


def _deactivate(data: dict[str, Any]) -> tuple[str, str]:
    return "Account deactivation", _layout(
        "Account deactivation request",
        f"<p>Your confirmation code:</p><h1>{escape(data['token'])}</h1>"
        "<p>The code is valid for 5 minutes.</p>"
        f"{_request_info(data)}",
    )


def _account_deletion(data: dict[str, Any]) -> tuple[str, str]:
    link = f"{get_app_environ_config().FRONTEND_BASE_URL}/account/create"
    return "Your account was deleted", _layout(
        "Your account was deleted",
        "<p>All of your data has been permanently removed. You will no longer receive notifications.</p>"
        f"<p>You are welcome back any time: <a href=\"{link}\">create an account</a>.</p>",
    )


def _enable_two_factor(data: dict[str, Any]) -> tuple[str, str]:
    link = f"{get_app_environ_config().FRONTEND_BASE_URL}/dashboard/settings"
    return "Protect your account", _layout(
        "Protect your account",
        f"<p>Enable two-factor authentication in your <a href=\"{link}\">account settings</a>.</p>",
    )


TEMPLATES: dict[MailTemplate, Callable[[dict[str, Any]], tuple[str, str]]] = {
    MailTemplate.VERIFICATION: _verification,
    MailTemplate.PASSWORD_RECOVERY: _password_recovery,
    MailTemplate.DEACTIVATE: _deactivate,
    MailTemplate.ACCOUNT_DELETION: _account_deletion,
    MailTemplate.ENABLE_TWO_FACTOR: _enable_two_factor,
}


def render(template_id: MailTemplate, data: dict[str, Any]) -> tuple[str, str]:
    """Return (subject, html) for a template."""
    return TEMPLATES[template_id](data)
