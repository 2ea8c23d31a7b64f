"""Webhook schemas for external providers."""

from app.api.webhooks.schemas.livekit import IngressEndedEvent, IngressInfo, IngressStartedEvent

__all__ = ["IngressEndedEvent", "IngressInfo", "IngressStartedEvent"]
