"""Abstract base class for the semantic knowledge search.

The knowledge store holds short facts about businesses ("wood-fired pizza,
open late", "rooftop terrace").  Searching it returns one scored match per
fact, so the same business may come back several times.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from atlas.models.business import KnowledgeMatch


# Concrete implementations: ChromaDBKnowledgeProvider
# Located in: atlas/providers/knowledge/
class IKnowledgeSearchProvider(ABC):
    """Contract for tenant-scoped semantic search over business facts."""

    @abstractmethod
    async def search(
        self,
        query_text: str,
        tenant_id: str,
        limit: int = 20,
    ) -> list[KnowledgeMatch]:
        """Return up to *limit* matches for *query_text* within *tenant_id*.

        Parameters
        ----------
        query_text:
            The (possibly synonym-expanded) search text.
        tenant_id:
            Only facts belonging to this tenant may be returned.
        limit:
            Maximum number of fact-level matches.

        Returns
        -------
        list[KnowledgeMatch]
            Matches with ``relevance_score`` in ``[0, 1]``, best first.
            Duplicate business ids are expected.

        Raises
        ------
        atlas.utils.errors.KnowledgeSearchError
            If the store or its embedding backend fails.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier such as ``"chromadb"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the store is configured and usable."""
