"""Abstract base class for deriving the tenant from an inbound request.

The tenant is never taken from the request body.  It comes from the host
the request was sent to, and only development/preview hosts may pass an
explicit override.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping


# Concrete implementations: HostnameTenantResolver
# Located in: atlas/providers/tenant/
class ITenantResolver(ABC):
    """Contract for mapping a request host to a tenant id."""

    @abstractmethod
    def resolve(self, host: str | None, query_params: Mapping[str, str]) -> str:
        """Return the tenant id for a request.

        Parameters
        ----------
        host:
            The ``Host`` header (may include a port), or ``None``.
        query_params:
            The request's query-string parameters.

        Raises
        ------
        atlas.utils.errors.TenantResolutionError
            With ``status_code`` 400 when no tenant can be derived, or 403
            when an override is attempted on a host that does not allow it.
        """
