"""Abstract base class for per-tenant tuning (minimum rating, result count)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from atlas.models.query import TenantConfig


# Concrete implementations: SQLiteTenantConfigProvider
# Located in: atlas/providers/tenant/
class ITenantConfigProvider(ABC):
    """Read-only lookup of :class:`~atlas.models.query.TenantConfig`."""

    @abstractmethod
    async def get(self, tenant_id: str) -> TenantConfig | None:
        """Return the stored config for *tenant_id*, or ``None`` if there is none.

        Callers use :class:`TenantConfig` defaults when ``None`` comes back.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier such as ``"sqlite"``."""
