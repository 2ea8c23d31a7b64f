"""S3 compatible media storage.

Avatars and stream thumbnails are stored under object keys such as
`channels/<user_id>/<ulid>.webp` and `streams/<stream_id>/<ulid>.png`. Documents keep the key,
clients build the public URL from their own media base URL.

Usage:
    from app.services.integrations.s3_storage import storage_service

    key = await storage_service.upload("channels/us_01h/01j.webp", body, "image/webp")
    await storage_service.remove(key)
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from app.app_config import get_app_environ_config
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


class StorageService:
    """Async wrapper around the S3 object API."""

    def __init__(self) -> None:
        self._cfg = get_app_environ_config()
        self._session: aioboto3.Session | None = None
        self._demo_mode = bool(self._cfg.DEMO_MODE)
        logger.info("StorageService initialized")

    def _get_session(self) -> aioboto3.Session:
        if self._session is None:
            if not self._cfg.AWS_ACCESS_KEY_ID or not self._cfg.AWS_SECRET_ACCESS_KEY:
                raise AppError(
                    errcode=AppErrorCode.E_STORAGE_ERROR,
                    errmesg="Storage credentials not configured",
                    status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
                )

            self._session = aioboto3.Session(
                aws_access_key_id=self._cfg.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=self._cfg.AWS_SECRET_ACCESS_KEY,
                region_name=self._cfg.AWS_REGION,
            )
            logger.info(f"S3 session created for region: {self._cfg.AWS_REGION}")

        return self._session

    @asynccontextmanager
    async def _get_client(self) -> AsyncIterator:  # type: ignore[misc]
        session = self._get_session()
        async with session.client("s3", endpoint_url=self._cfg.S3_ENDPOINT_URL) as client:  # type: ignore[attr-defined]
            yield client

    def _get_bucket_name(self) -> str:
        if not self._cfg.S3_MEDIA_BUCKET:
            raise AppError(
                errcode=AppErrorCode.E_STORAGE_ERROR,
                errmesg="S3_MEDIA_BUCKET not configured",
                status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
            )
        return self._cfg.S3_MEDIA_BUCKET

    async def upload(self, key: str, body: bytes, content_type: str) -> str:
        """Store `body` under `key` and return the key."""
        if self._demo_mode:
            logger.info(f"StorageService DEMO_MODE=true: stubbed upload {key} ({len(body)} bytes)")
            return key

        bucket = self._get_bucket_name()
        try:
            async with self._get_client() as client:
                await client.put_object(
                    Bucket=bucket,
                    Key=key,
                    Body=body,
                    ContentType=content_type,
                    CacheControl="public, max-age=3600",
                )
        except ClientError as e:
            logger.error(f"Failed to upload {key}: {e}")
            raise AppError(
                errcode=AppErrorCode.E_STORAGE_ERROR,
                errmesg="Failed to upload file",
                status_code=HttpStatusCode.BAD_GATEWAY,
            ) from e

        logger.info(f"Uploaded object {key}")
        return key

    async def remove(self, key: str) -> bool:
        """Delete the object stored under `key`. Missing objects are not an error."""
        if self._demo_mode:
            logger.info(f"StorageService DEMO_MODE=true: stubbed remove {key}")
            return True

        bucket = self._get_bucket_name()
        try:
            async with self._get_client() as client:
                await client.delete_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to remove {key}: {e}")
            return False

        logger.info(f"Removed object {key}")
        return True


storage_service = StorageService()
