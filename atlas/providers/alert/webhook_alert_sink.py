"""Webhook leak alert sink.

Posts a JSON payload to ``ALERT_WEBHOOK_URL`` (Slack-compatible ``text``
field plus structured details) using ``httpx``.  The HTTP client is
shared and owned by the application lifespan.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from atlas.interfaces.alert_sink import IAlertSink
from atlas.utils.errors import AlertDeliveryError

logger = structlog.get_logger(logger_name=__name__)


class WebhookAlertSink(IAlertSink):
    """Deliver leak alerts to an HTTP webhook.

    Constructor injection: the URL and the client are passed in, not read
    from the environment.
    """

    def __init__(
        self,
        *,
        webhook_url: str,
        client: httpx.AsyncClient,
        timeout: float = 5.0,
    ) -> None:
        self._webhook_url = webhook_url
        self._client = client
        self._timeout = timeout

    @staticmethod
    def build_payload(tenant_id: str, violations: list[dict[str, object]]) -> dict[str, Any]:
        ids = ", ".join(str(v.get("business_id")) for v in violations)
        return {
            "text": (
                f":rotating_light: Atlas tier leak for tenant `{tenant_id}`: "
                f"{len(violations)} ineligible record(s) fetched ({ids})"
            ),
            "event": "tier_leak_alert",
            "tenant_id": tenant_id,
            "violations": violations,
        }

    async def raise_leak_alert(
        self,
        tenant_id: str,
        violations: list[dict[str, object]],
    ) -> None:
        payload = self.build_payload(tenant_id, violations)
        try:
            resp = await self._client.post(
                self._webhook_url,
                json=payload,
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            raise AlertDeliveryError(
                message=f"Webhook request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if resp.status_code >= 400:
            raise AlertDeliveryError(
                message=f"Webhook returned HTTP {resp.status_code}",
                provider_name=self.get_provider_name(),
            )
        logger.info("leak_alert_delivered", tenant_id=tenant_id, status_code=resp.status_code)

    def get_provider_name(self) -> str:
        return "webhook"
