"""Embedding provider adapters (IEmbeddingProvider implementations)."""

from atlas.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["OpenAIEmbeddingProvider"]
