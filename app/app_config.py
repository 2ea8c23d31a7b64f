from pydantic import BaseModel

from app.shared.config import config


class AppEnvironConfig(BaseModel):
    # Public demo switch: when enabled, external integrations use stubs and avoid network calls.
    DEMO_MODE: bool = config.get("DEMO_MODE", "true").strip().lower() == "true"  # type: ignore

    API_BASE_URL: str = config.get("API_BASE_URL", "http://localhost:8000").strip()  # type: ignore
    FRONTEND_BASE_URL: str = config.get("FRONTEND_BASE_URL", "http://localhost:3000").strip()  # type: ignore

    # Session cookie
    SESSION_SECRET: str = config.get("SESSION_SECRET", "dev-secret").strip()  # type: ignore
    SESSION_COOKIE_NAME: str = config.get("SESSION_COOKIE_NAME", "session").strip()  # type: ignore
    SESSION_MAX_AGE_SECONDS: int = int(
        (config.get("SESSION_MAX_AGE_SECONDS") or "").strip() or 60 * 60 * 24 * 30
    )
    SESSION_COOKIE_SECURE: bool = config.get("SESSION_COOKIE_SECURE", "false").strip().lower() == "true"  # type: ignore
    SESSION_COOKIE_DOMAIN: str | None = (config.get("SESSION_COOKIE_DOMAIN") or "").strip() or None

    # Two-factor
    TOTP_ISSUER: str = config.get("TOTP_ISSUER", "StreamHub").strip()  # type: ignore

    # Deactivated account retention before the sweep deletes them
    DEACTIVATED_RETENTION_DAYS: int = int(
        (config.get("DEACTIVATED_RETENTION_DAYS") or "").strip() or 7
    )

    # Mail
    MAIL_HOST: str | None = (config.get("MAIL_HOST") or "").strip() or None
    MAIL_PORT: int = int((config.get("MAIL_PORT") or "").strip() or 587)
    MAIL_LOGIN: str | None = (config.get("MAIL_LOGIN") or "").strip() or None
    MAIL_PASSWORD: str | None = (config.get("MAIL_PASSWORD") or "").strip() or None
    MAIL_FROM: str = config.get("MAIL_FROM", "no-reply@streamhub.local").strip()  # type: ignore

    # Telegram bot
    TELEGRAM_BOT_TOKEN: str | None = (config.get("TELEGRAM_BOT_TOKEN") or "").strip() or None
    TELEGRAM_API_BASE_URL: str = config.get(
        "TELEGRAM_API_BASE_URL", "https://api.telegram.org"
    ).strip()  # type: ignore
    TELEGRAM_WEBHOOK_SECRET: str | None = (
        config.get("TELEGRAM_WEBHOOK_SECRET") or ""
    ).strip() or None

    # LiveKit configuration
    LIVEKIT_URL: str | None = (config.get("LIVEKIT_URL") or "").strip() or None
    LIVEKIT_API_KEY: str | None = (config.get("LIVEKIT_API_KEY") or "").strip() or None
    LIVEKIT_API_SECRET: str | None = (config.get("LIVEKIT_API_SECRET") or "").strip() or None

    # S3 compatible object storage
    AWS_ACCESS_KEY_ID: str | None = (config.get("AWS_ACCESS_KEY_ID") or "").strip() or None
    AWS_SECRET_ACCESS_KEY: str | None = (config.get("AWS_SECRET_ACCESS_KEY") or "").strip() or None
    AWS_REGION: str = config.get("AWS_REGION", "us-east-1").strip()  # type: ignore
    S3_ENDPOINT_URL: str | None = (config.get("S3_ENDPOINT_URL") or "").strip() or None
    S3_MEDIA_BUCKET: str | None = (config.get("S3_MEDIA_BUCKET") or "").strip() or None


_app_environ_config = AppEnvironConfig()


def get_app_environ_config() -> AppEnvironConfig:
    return _app_environ_config
