"""Unit tests for the leak alert sinks."""

from __future__ import annotations

import json

import httpx
import pytest

from atlas.providers.alert.log_alert_sink import LogAlertSink
from atlas.providers.alert.webhook_alert_sink import WebhookAlertSink
from atlas.utils.errors import AlertDeliveryError

_VIOLATIONS = [
    {"business_id": "cafe", "tier": "starter", "has_coordinate": True},
    {"business_id": "ghost", "tier": "featured", "has_coordinate": False},
]


class TestLogAlertSink:
    @pytest.mark.asyncio
    async def test_raise_leak_alert_does_not_raise(self) -> None:
        sink = LogAlertSink()
        await sink.raise_leak_alert("bournemouth", _VIOLATIONS)
        assert sink.get_provider_name() == "log"


class TestWebhookAlertSink:
    def test_build_payload(self) -> None:
        payload = WebhookAlertSink.build_payload("bournemouth", _VIOLATIONS)
        assert payload["event"] == "tier_leak_alert"
        assert payload["tenant_id"] == "bournemouth"
        assert payload["violations"] == _VIOLATIONS
        assert "cafe, ghost" in payload["text"]
        assert "2 ineligible" in payload["text"]

    @pytest.mark.asyncio
    async def test_posts_payload(self) -> None:
        received: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            received.append(request)
            return httpx.Response(200, json={"ok": True})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            sink = WebhookAlertSink(webhook_url="https://hooks.example.test/atlas", client=client)
            await sink.raise_leak_alert("bournemouth", _VIOLATIONS)

        assert len(received) == 1
        assert str(received[0].url) == "https://hooks.example.test/atlas"
        body = json.loads(received[0].content)
        assert body["tenant_id"] == "bournemouth"

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            sink = WebhookAlertSink(webhook_url="https://hooks.example.test/atlas", client=client)
            with pytest.raises(AlertDeliveryError, match="502"):
                await sink.raise_leak_alert("bournemouth", _VIOLATIONS)

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            sink = WebhookAlertSink(webhook_url="https://hooks.example.test/atlas", client=client)
            with pytest.raises(AlertDeliveryError) as exc_info:
                await sink.raise_leak_alert("bournemouth", _VIOLATIONS)

        assert exc_info.value.provider_name == "webhook"
