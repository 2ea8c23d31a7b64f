"""LiveKit helper service.

This module provides a thin wrapper around the `livekit-api` package.

Based on the official LiveKit Python SDK:
https://github.com/livekit/python-sdks

Usage:
    from app.services.integrations.livekit_service import livekit_service

    # Viewer token for a channel room
    token = livekit_service.create_access_token(
        identity="us_01h...",
        room="us_01h...",
        name="John Doe",
    )

    # Fresh RTMP ingress for a broadcaster
    ingress = await livekit_service.create_ingress(
        ingress_type=IngressType.RTMP_INPUT,
        room_name="us_01h...",
        participant_identity="us_01h...",
        participant_name="john",
    )
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum

from livekit import api
from loguru import logger

from app.app_config import get_app_environ_config
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


class IngressType(str, Enum):
    RTMP_INPUT = "RTMP_INPUT"
    WHIP_INPUT = "WHIP_INPUT"


@dataclass
class IngressEndpoint:
    ingress_id: str
    url: str
    stream_key: str


class LivekitService:
    """Service wrapper for LiveKit server SDK (livekit-api package).

    This service provides specific methods for LiveKit operations to make
    usage patterns explicit and discoverable.
    """

    def __init__(self) -> None:
        self._cfg = get_app_environ_config()
        self._demo_mode = bool(getattr(self._cfg, "DEMO_MODE", True))
        logger.info("LivekitService initialized")

    @asynccontextmanager
    async def _get_api_client(self) -> AsyncIterator[api.LiveKitAPI]:
        """Internal method to get LiveKit API client.

        This is private to force callers to use specific methods.
        """
        url = self._cfg.LIVEKIT_URL
        if not url:
            logger.error("LIVEKIT_URL not configured")
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="RTC provider URL must be configured. Set it in env.local or environment variables.",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        logger.debug(f"Creating LiveKit API client for URL={url}")
        async with api.LiveKitAPI(
            url,
            api_key=self._cfg.LIVEKIT_API_KEY,
            api_secret=self._cfg.LIVEKIT_API_SECRET,
        ) as lkapi:
            yield lkapi

    def _credentials(self) -> tuple[str, str]:
        api_key = self._cfg.LIVEKIT_API_KEY
        api_secret = self._cfg.LIVEKIT_API_SECRET
        if not api_key or not api_secret:
            logger.error("LIVEKIT_API_KEY or LIVEKIT_API_SECRET not configured")
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="RTC provider credentials must be configured. Set them in env.local or environment variables.",
                status_code=HttpStatusCode.BAD_REQUEST,
            )
        return api_key, api_secret

    def create_access_token(
        self,
        identity: str,
        room: str,
        name: str | None = None,
        can_publish: bool = False,
        can_publish_data: bool = True,
    ) -> str:
        """Create a room join token.

        Args:
            identity: Participant identity
            room: Room to join
            name: Display name shown to other participants
            can_publish: Whether the participant may publish media
            can_publish_data: Whether the participant may send data messages

        Returns:
            JWT token string
        """
        if self._demo_mode:
            return f"DEMO_ACCESS_TOKEN::{room}::{identity}"

        api_key, api_secret = self._credentials()
        logger.info(f"Creating LiveKit access token for identity={identity}, room={room}, name={name}")

        token = api.AccessToken(api_key, api_secret).with_identity(identity)
        if name:
            token = token.with_name(name)

        grants = api.VideoGrants(
            room_join=True,
            room=room,
            can_publish=can_publish,
            can_subscribe=True,
            can_publish_data=can_publish_data,
        )
        return token.with_grants(grants).to_jwt()

    async def list_ingresses(self, room_name: str) -> list[str]:
        """Return ingress ids bound to a room."""
        if self._demo_mode:
            logger.info("LivekitService DEMO_MODE=true: list_ingresses returns [] (stub)")
            return []

        async with self._get_api_client() as lkapi:
            response = await lkapi.ingress.list_ingress(api.ListIngressRequest(room_name=room_name))
            return [item.ingress_id for item in response.items]

    async def delete_ingress(self, ingress_id: str) -> None:
        if self._demo_mode:
            logger.info(f"LivekitService DEMO_MODE=true: stubbed delete_ingress {ingress_id}")
            return

        logger.info(f"Deleting LiveKit ingress: ingress_id={ingress_id}")
        async with self._get_api_client() as lkapi:
            await lkapi.ingress.delete_ingress(api.DeleteIngressRequest(ingress_id=ingress_id))

    async def reset_ingresses(self, room_name: str) -> int:
        """Delete every ingress bound to a room. Returns the number deleted."""
        ingress_ids = await self.list_ingresses(room_name)
        for ingress_id in ingress_ids:
            await self.delete_ingress(ingress_id)
        if ingress_ids:
            logger.info(f"Reset {len(ingress_ids)} ingress(es) for room={room_name}")
        return len(ingress_ids)

    async def create_ingress(
        self,
        ingress_type: IngressType,
        room_name: str,
        participant_identity: str,
        participant_name: str,
    ) -> IngressEndpoint:
        """Create an RTMP or WHIP ingress publishing into `room_name`."""
        if self._demo_mode:
            logger.info(f"LivekitService DEMO_MODE=true: stubbed create_ingress for room={room_name}")
            return IngressEndpoint(
                ingress_id=f"IN_demo_{room_name}",
                url=f"rtmp://demo.livekit.local/{ingress_type.value.lower()}",
                stream_key=f"demo_key_{room_name}",
            )

        input_type = (
            api.IngressInput.WHIP_INPUT
            if ingress_type == IngressType.WHIP_INPUT
            else api.IngressInput.RTMP_INPUT
        )
        request = api.CreateIngressRequest(
            input_type=input_type,
            name=participant_identity,
            room_name=room_name,
            participant_identity=participant_identity,
            participant_name=participant_name,
            # WHIP sources publish already-encoded tracks
            enable_transcoding=ingress_type == IngressType.RTMP_INPUT,
        )

        logger.info(f"Creating LiveKit {ingress_type.value} ingress for room={room_name}")
        async with self._get_api_client() as lkapi:
            info = await lkapi.ingress.create_ingress(request)

        logger.debug(f"Created LiveKit ingress: ingress_id={info.ingress_id}")
        return IngressEndpoint(ingress_id=info.ingress_id, url=info.url, stream_key=info.stream_key)

    def verify_webhook(self, body: str, authorization: str | None) -> None:
        """Validate the signed webhook Authorization header against the body."""
        if self._demo_mode:
            return

        api_key, api_secret = self._credentials()
        if not authorization:
            raise AppError(
                errcode=AppErrorCode.E_UNAUTHORIZED,
                errmesg="Missing webhook authorization",
                status_code=HttpStatusCode.UNAUTHORIZED,
            )
        receiver = api.WebhookReceiver(api.TokenVerifier(api_key, api_secret))
        try:
            receiver.receive(body, authorization)
        except Exception as e:
            logger.warning(f"Rejected LiveKit webhook: {e}")
            raise AppError(
                errcode=AppErrorCode.E_UNAUTHORIZED,
                errmesg="Invalid webhook signature",
                status_code=HttpStatusCode.UNAUTHORIZED,
            ) from e


livekit_service = LivekitService()
