"""LiveKit webhook event schemas.

Pydantic models for the LiveKit webhook events the service reacts to.

References:
- https://docs.livekit.io/home/server/webhooks/
- livekit.protocol.webhook.WebhookEvent
- livekit.protocol.models (IngressInfo)
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class IngressState(str, Enum):
    """Ingress stream state."""

    ENDPOINT_INACTIVE = "ENDPOINT_INACTIVE"
    ENDPOINT_BUFFERING = "ENDPOINT_BUFFERING"
    ENDPOINT_PUBLISHING = "ENDPOINT_PUBLISHING"
    ENDPOINT_ERROR = "ENDPOINT_ERROR"
    ENDPOINT_COMPLETE = "ENDPOINT_COMPLETE"


class IngressStatus(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: IngressState | None = Field(None, description="Ingress state")
    error: str | None = Field(None, description="Error message if failed")


class IngressInfo(BaseModel):
    """Ingress stream information."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    ingress_id: str = Field(..., alias="ingressId", description="Ingress server ID")
    name: str | None = Field(None, description="Ingress name")
    stream_key: str | None = Field(None, alias="streamKey", description="Stream key for RTMP/WHIP")
    url: str | None = Field(None, description="Ingress URL")
    room_name: str | None = Field(None, alias="roomName", description="Room name")
    participant_identity: str | None = Field(
        None, alias="participantIdentity", description="Participant identity"
    )
    participant_name: str | None = Field(
        None, alias="participantName", description="Participant name"
    )
    state: IngressStatus | None = Field(None, description="Ingress state")


class _IngressEvent(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str | None = Field(None, description="Event UUID")
    created_at: int | str | None = Field(None, alias="createdAt", description="Event timestamp (seconds)")
    ingress_info: IngressInfo = Field(..., alias="ingressInfo", description="Ingress information")


class IngressStartedEvent(_IngressEvent):
    """Ingress started event."""

    event: Literal["ingress_started"] = "ingress_started"


class IngressEndedEvent(_IngressEvent):
    """Ingress ended event."""

    event: Literal["ingress_ended"] = "ingress_ended"
