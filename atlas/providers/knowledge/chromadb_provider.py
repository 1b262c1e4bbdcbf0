"""ChromaDB knowledge search adapter.

Each business is indexed as several short facts.  Every fact carries the
``business_id`` and ``tenant_id`` it belongs to as metadata, and searches
always filter on ``tenant_id`` so one tenant's businesses never surface in
another tenant's results.  Cosine distance is converted to a 0..1
relevance score.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import Any

# ChromaDB's anonymous telemetry is off in every environment.
os.environ["ANONYMIZED_TELEMETRY"] = "False"

import chromadb
import structlog

from atlas.interfaces.embedding_provider import IEmbeddingProvider
from atlas.interfaces.knowledge_search_provider import IKnowledgeSearchProvider
from atlas.models.business import BusinessFact, KnowledgeMatch
from atlas.utils.errors import KnowledgeSearchError

logger = structlog.get_logger(logger_name=__name__)


class _NoopEmbeddingFunction(chromadb.EmbeddingFunction[list[str]]):
    """Stops ChromaDB from loading its default ONNX model.

    All vectors come from the injected :class:`IEmbeddingProvider`, so the
    collection's own embedding function must never run.
    """

    def __call__(self, input: list[str]) -> list[list[float]]:
        raise NotImplementedError("Atlas passes pre-computed embeddings to ChromaDB.")

    def name(self) -> str:
        return "noop_precomputed"


class ChromaDBKnowledgeProvider(IKnowledgeSearchProvider):
    """Knowledge search backed by a persistent ChromaDB collection."""

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        persist_directory: str = "./data/chromadb",
        collection_name: str = "atlas_business_facts",
        client: Any = None,
    ) -> None:
        self._embedding_provider = embedding_provider
        self._persist_directory = persist_directory
        self._collection_name = collection_name
        self._client = client or chromadb.PersistentClient(
            path=persist_directory,
            settings=chromadb.config.Settings(anonymized_telemetry=False),
        )
        # Collections created by other tooling may carry a different
        # persisted embedding function; reopen without one in that case.
        try:
            self._collection = self._client.get_or_create_collection(
                name=collection_name,
                metadata={"hnsw:space": "cosine"},
                embedding_function=_NoopEmbeddingFunction(),
            )
        except ValueError:
            self._collection = self._client.get_or_create_collection(
                name=collection_name,
                metadata={"hnsw:space": "cosine"},
            )

    # ------------------------------------------------------------------
    # IKnowledgeSearchProvider implementation
    # ------------------------------------------------------------------

    async def search(
        self,
        query_text: str,
        tenant_id: str,
        limit: int = 20,
    ) -> list[KnowledgeMatch]:
        """Return fact-level matches for *query_text* within *tenant_id*."""
        if limit <= 0 or not query_text.strip():
            return []
        if not self._embedding_provider.is_available():
            raise KnowledgeSearchError(
                message="No embedding provider configured",
                provider_name=self.get_provider_name(),
            )

        try:
            query_embedding = await self._embedding_provider.embed_single(query_text)
            results = self._collection.query(
                query_embeddings=[query_embedding],
                n_results=limit,
                where={"tenant_id": tenant_id},
                include=["metadatas", "distances"],
            )
        except KnowledgeSearchError:
            raise
        except Exception as exc:
            raise KnowledgeSearchError(
                message=f"ChromaDB query failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        metadatas = (results.get("metadatas") or [[]])[0] or []
        distances = (results.get("distances") or [[]])[0] or []

        matches: list[KnowledgeMatch] = []
        for meta, distance in zip(metadatas, distances, strict=False):
            similarity = max(0.0, min(1.0, 1.0 - float(distance)))
            business_id = (meta or {}).get("business_id") or None
            matches.append(
                KnowledgeMatch(business_id=business_id, relevance_score=similarity)
            )

        logger.info(
            "chromadb_search",
            tenant_id=tenant_id,
            query_length=len(query_text),
            results_count=len(matches),
            top_score=matches[0].relevance_score if matches else 0.0,
        )
        return matches

    def get_provider_name(self) -> str:
        return "chromadb"

    def is_available(self) -> bool:
        return self._embedding_provider.is_available()

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    async def index_facts(self, facts: Sequence[BusinessFact], batch_size: int = 500) -> int:
        """Embed and upsert *facts*; returns the number stored."""
        if not facts:
            return 0

        try:
            total_stored = 0
            for start in range(0, len(facts), batch_size):
                batch = list(facts[start : start + batch_size])
                embeddings = await self._embedding_provider.embed([f.text for f in batch])
                self._collection.upsert(
                    ids=[f.fact_id for f in batch],
                    embeddings=embeddings,
                    documents=[f.text for f in batch],
                    metadatas=[
                        {"business_id": f.business_id, "tenant_id": f.tenant_id}
                        for f in batch
                    ],
                )
                total_stored += len(batch)
        except KnowledgeSearchError:
            raise
        except Exception as exc:
            raise KnowledgeSearchError(
                message=f"ChromaDB index_facts failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        logger.info("chromadb_index_facts", count=total_stored)
        return total_stored

    async def count(self) -> int:
        return self._collection.count()
