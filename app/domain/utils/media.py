from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .idgen import new_ulid

IMAGE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def media_key(folder: str, owner_id: str, content_type: str | None) -> str:
    """Object key for a new image upload under `folder/owner_id`."""
    extension = IMAGE_EXTENSIONS.get((content_type or "").lower())
    if extension is None:
        raise AppError(
            errcode=AppErrorCode.E_INVALID_REQUEST,
            errmesg=f"Unsupported image type: {content_type}",
            status_code=HttpStatusCode.BAD_REQUEST,
        )
    return f"{folder}/{owner_id}/{new_ulid()}.{extension}"
