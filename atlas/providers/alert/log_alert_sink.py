"""Default leak alert sink: a critical structlog event.

In production the JSON log stream is shipped to the log aggregator, which
pages on ``level == "critical"``.
"""

from __future__ import annotations

import structlog

from atlas.interfaces.alert_sink import IAlertSink

logger = structlog.get_logger(logger_name=__name__)


class LogAlertSink(IAlertSink):
    """Emit every leak alert as a ``tier_leak_alert`` critical log event."""

    async def raise_leak_alert(
        self,
        tenant_id: str,
        violations: list[dict[str, object]],
    ) -> None:
        logger.critical(
            "tier_leak_alert",
            tenant_id=tenant_id,
            violation_count=len(violations),
            violations=violations,
        )

    def get_provider_name(self) -> str:
        return "log"
