from ulid import ULID


def new_ulid(prefix: str | None = None) -> str:
    value = str(ULID()).lower()
    return f"{prefix}{value}" if prefix else value


def new_user_id() -> str:
    return new_ulid("us_")


def new_stream_id() -> str:
    return new_ulid("st_")


def new_notification_id() -> str:
    return new_ulid("nt_")


def new_message_id() -> str:
    return new_ulid("cm_")


def new_social_link_id() -> str:
    return new_ulid("sl_")
