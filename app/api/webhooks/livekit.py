"""LiveKit webhook endpoint.

LiveKit signs each webhook with a JWT in the Authorization header whose sha256 claim
covers the raw body. The signature is verified before the payload is parsed.

Handled events:
- ingress_started: the broadcaster's encoder connected, the stream goes live
- ingress_ended: the encoder disconnected, the stream goes offline and its chat is cleared

References:
- https://docs.livekit.io/home/server/webhooks/
- Pydantic schemas: app.api.webhooks.schemas.livekit
"""

from __future__ import annotations

from typing import Any

import orjson
from fastapi import APIRouter, Depends, Header, Request
from loguru import logger
from pydantic import ValidationError

from app.api.v1.schemas.base import ApiOut
from app.api.webhooks.schemas.livekit import IngressEndedEvent, IngressStartedEvent
from app.domain.stream.ingress_domain import IngressService
from app.services.integrations.livekit_service import livekit_service
from app.shared.api.utils import api_failure, make_response
from app.utils.app_errors import AppErrorCode

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])

_ingress_service = IngressService()


def get_ingress_service() -> IngressService:
    return _ingress_service


async def handle_ingress_started(event: IngressStartedEvent, service: IngressService) -> dict[str, Any]:
    logger.info(f"INGRESS STARTED: {event.ingress_info.ingress_id} room={event.ingress_info.room_name}")
    notified = await service.handle_ingress_started(event.ingress_info.ingress_id)
    return {"handled": "ingress_started", "ingress_id": event.ingress_info.ingress_id, "notified": notified}


async def handle_ingress_ended(event: IngressEndedEvent, service: IngressService) -> dict[str, Any]:
    logger.info(f"INGRESS ENDED: {event.ingress_info.ingress_id} room={event.ingress_info.room_name}")
    if event.ingress_info.state and event.ingress_info.state.error:
        logger.error(f"   Error: {event.ingress_info.state.error}")
    updated = await service.handle_ingress_ended(event.ingress_info.ingress_id)
    return {"handled": "ingress_ended", "ingress_id": event.ingress_info.ingress_id, "updated": updated}


@router.post("/livekit")
async def livekit_webhook(
    request: Request,
    authorization: str | None = Header(None),
    service: IngressService = Depends(get_ingress_service),
):
    """Receive and process LiveKit webhook events."""
    body_str = (await request.body()).decode("utf-8")
    livekit_service.verify_webhook(body_str, authorization)

    try:
        event_data = orjson.loads(body_str)
    except orjson.JSONDecodeError as exc:
        logger.error(f"Invalid JSON in webhook body: {exc}")
        return make_response(
            api_failure(AppErrorCode.E_INVALID_REQUEST.value, errmesg=f"Invalid JSON: {exc!s}"),
            status_code=400,
        )

    event_type = event_data.get("event") if isinstance(event_data, dict) else None
    logger.info(f"LiveKit Webhook: {event_type}")

    try:
        if event_type == "ingress_started":
            result = await handle_ingress_started(IngressStartedEvent(**event_data), service)
        elif event_type == "ingress_ended":
            result = await handle_ingress_ended(IngressEndedEvent(**event_data), service)
        else:
            logger.debug(f"Ignored LiveKit webhook event: {event_type}")
            result = {"ignored": True, "event": event_type}
    except ValidationError as exc:
        logger.error(f"Failed to parse {event_type} event: {exc}")
        return make_response(
            api_failure(AppErrorCode.E_INVALID_PARAMS.value, errmesg=f"Failed to parse event: {exc!s}"),
            status_code=400,
        )

    return ApiOut[dict[str, Any]](results=result)
