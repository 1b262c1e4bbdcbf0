"""Abstract base class for the eligibility-scoped business store.

Implementations must read from a source that structurally excludes
ineligible businesses (unpaid tiers, missing coordinates, other tenants,
ratings below the tenant minimum).  The pipeline re-checks every record
afterwards, but the scoping here is the first line of defence.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from atlas.models.business import BusinessCandidate


# Concrete implementations: SQLiteCandidateStore
# Located in: atlas/providers/business/
class ICandidateStore(ABC):
    """Contract for fetching business records that may be shown on the map."""

    @abstractmethod
    async def fetch(
        self,
        ids: list[str],
        tenant_id: str,
        min_rating: float,
    ) -> list[BusinessCandidate]:
        """Fetch eligible business records for *ids*.

        Parameters
        ----------
        ids:
            Business ids from the knowledge search, best match first.
        tenant_id:
            Tenant whose businesses may be returned.
        min_rating:
            Rows rated below this are excluded, as are rows with no rating
            at all.

        Returns
        -------
        list[BusinessCandidate]
            Records in *ids* order.  Ids that are unknown or ineligible are
            simply missing from the result.

        Raises
        ------
        atlas.utils.errors.CandidateFetchError
            If the store cannot be read.
        """

    @abstractmethod
    async def list_for_map(
        self,
        tenant_id: str,
        min_rating: float,
        name_filter: str = "",
        limit: int = 50,
    ) -> list[BusinessCandidate]:
        """Return eligible businesses of *tenant_id* for the map listing.

        Scoped like :meth:`fetch`: only businesses rated at least
        *min_rating*.  A non-empty *name_filter* keeps businesses whose
        display name contains it (case-insensitive).  Ordered SPOTLIGHT
        first, then by rating.

        Raises
        ------
        atlas.utils.errors.CandidateFetchError
            If the store cannot be read.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier such as ``"sqlite"``."""
