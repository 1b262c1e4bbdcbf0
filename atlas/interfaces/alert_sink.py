"""Abstract base class for out-of-band leak alerts.

A leak is an ineligible business that made it past the store's scoping.
It is always dropped from the response; this sink tells a human about it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: LogAlertSink, WebhookAlertSink
# Located in: atlas/providers/alert/
class IAlertSink(ABC):
    """Contract for raising critical leak alerts."""

    @abstractmethod
    async def raise_leak_alert(
        self,
        tenant_id: str,
        violations: list[dict[str, object]],
    ) -> None:
        """Report leaked records for *tenant_id*.

        Parameters
        ----------
        tenant_id:
            Tenant whose request surfaced the leak.
        violations:
            One summary per leaked record (business id, tier, whether it
            had a coordinate).  Coordinates themselves are never included.

        Raises
        ------
        atlas.utils.errors.AlertDeliveryError
            If the alert could not be delivered.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier such as ``"log"`` or ``"webhook"``."""
