from pydantic import BaseModel, Field

from app.services.integrations.livekit_service import IngressType


class ChangeStreamInfoIn(BaseModel):
    title: str = Field(description="Stream title, at most 100 characters")


class GenerateStreamTokenIn(BaseModel):
    channel_id: str = Field(description="User id of the channel to join")


class CreateIngressIn(BaseModel):
    ingress_type: IngressType = Field(default=IngressType.RTMP_INPUT, description="RTMP_INPUT or WHIP_INPUT")
