"""Abstract base class for text-embedding providers.

Embeddings back the knowledge search: business facts are embedded when
they are indexed and the (expanded) query text is embedded at search time.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: OpenAIEmbeddingProvider
# Located in: atlas/providers/embedding/
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by the knowledge search."""

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Parameters
        ----------
        texts:
            One or more text strings to embed.

        Returns
        -------
        list[list[float]]
            Vectors in the same order as *texts*, each of length
            :meth:`get_dimension`.

        Raises
        ------
        atlas.utils.errors.KnowledgeSearchError
            If the embedding API call fails.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Embed one string (convenience wrapper around :meth:`embed`)."""

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the dimensionality of the vectors, e.g. ``1536``."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return an identifier such as ``"openai-text-embedding-3-small"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured."""
