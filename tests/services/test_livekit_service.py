"""Tests for the LiveKit service wrapper."""

import base64
import hashlib

import orjson
import pytest
from livekit import api

from app.app_config import AppEnvironConfig
from app.services.integrations.livekit_service import IngressType, LivekitService
from app.utils.app_errors import AppError, HttpStatusCode

API_KEY = "APItestkey"
API_SECRET = "test-secret-that-is-long-enough-for-hs256"


@pytest.fixture
def live_service() -> LivekitService:
    service = LivekitService()
    service._demo_mode = False
    service._cfg = AppEnvironConfig(
        DEMO_MODE=False,
        LIVEKIT_URL="http://livekit.test",
        LIVEKIT_API_KEY=API_KEY,
        LIVEKIT_API_SECRET=API_SECRET,
    )
    return service


def _sign(body: str) -> str:
    digest = base64.b64encode(hashlib.sha256(body.encode()).digest()).decode()
    return api.AccessToken(API_KEY, API_SECRET).with_sha256(digest).to_jwt()


class TestDemoMode:
    def test_access_token_stub(self):
        service = LivekitService()
        service._demo_mode = True

        assert service.create_access_token("viewer", "room1") == "DEMO_ACCESS_TOKEN::room1::viewer"

    async def test_ingress_stub(self):
        service = LivekitService()
        service._demo_mode = True

        endpoint = await service.create_ingress(IngressType.RTMP_INPUT, "room1", "us_1", "alice")

        assert endpoint.ingress_id == "IN_demo_room1"
        assert await service.reset_ingresses("room1") == 0


class TestAccessToken:
    def test_host_grants(self, live_service: LivekitService):
        token = live_service.create_access_token("host-us_1", "us_1", name="alice", can_publish=True)

        claims = api.TokenVerifier(API_KEY, API_SECRET).verify(token)
        assert claims.identity == "host-us_1"
        assert claims.video is not None
        assert claims.video.room == "us_1"
        assert claims.video.can_publish is True


class TestVerifyWebhook:
    BODY = orjson.dumps(
        {"event": "ingress_started", "id": "EV_1", "ingressInfo": {"ingressId": "IN_1"}}
    ).decode()

    def test_valid_signature(self, live_service: LivekitService):
        live_service.verify_webhook(self.BODY, _sign(self.BODY))

    def test_tampered_body(self, live_service: LivekitService):
        with pytest.raises(AppError) as exc_info:
            live_service.verify_webhook(self.BODY.replace("IN_1", "IN_2"), _sign(self.BODY))

        assert exc_info.value.status_code == HttpStatusCode.UNAUTHORIZED

    def test_missing_header(self, live_service: LivekitService):
        with pytest.raises(AppError) as exc_info:
            live_service.verify_webhook(self.BODY, None)

        assert exc_info.value.status_code == HttpStatusCode.UNAUTHORIZED
