"""Leak alert sinks (IAlertSink implementations)."""

from atlas.providers.alert.log_alert_sink import LogAlertSink
from atlas.providers.alert.webhook_alert_sink import WebhookAlertSink

__all__ = ["LogAlertSink", "WebhookAlertSink"]
