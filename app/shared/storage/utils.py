from urllib.parse import urlsplit, urlunsplit


def hide_password(connection_string: str) -> str:
    """Mask the password part of a connection URL for logging."""
    try:
        parts = urlsplit(connection_string)
    except ValueError:
        return connection_string

    if not parts.password or not parts.username:
        return connection_string

    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    netloc = f"{parts.username}:***@{host}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


def label_from_env_var(env_var: str, prefix: str) -> str | None:
    """Map `<PREFIX>_URL_<LABEL>` (or `<PREFIX>_<LABEL>_URL`) to a lowercase label."""
    head = f"{prefix}_URL_"
    if env_var.startswith(head):
        return env_var[len(head):].lower()
    if env_var != f"{prefix}_URL" and env_var.startswith(f"{prefix}_") and env_var.endswith("_URL"):
        return env_var.split("_")[1].lower()
    return None
