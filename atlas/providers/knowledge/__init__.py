"""Knowledge search adapters (IKnowledgeSearchProvider implementations)."""

from atlas.providers.knowledge.chromadb_provider import ChromaDBKnowledgeProvider

__all__ = ["ChromaDBKnowledgeProvider"]
