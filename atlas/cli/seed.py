"""Seed-file loading for ``python -m atlas.cli seed``.

A seed file is JSON::

    {
      "tenants": [
        {"tenant_id": "bournemouth", "min_rating": 4.4, "max_results": 5}
      ],
      "businesses": [
        {
          "business_id": "biz-001",
          "tenant_id": "bournemouth",
          "display_name": "Harbour Sushi",
          "rating": 4.7,
          "tier": "spotlight",
          "lat": 50.72, "lng": -1.88,
          "facts": ["Fresh sushi and sashimi", "Seafront terrace"]
        }
      ]
    }

Every business is written to SQLite whatever its tier; only the
``eligible_businesses`` view decides what the pipeline can see.  Facts
are indexed for all businesses so the leak guard has something to catch
if the view is ever wrong.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

from atlas.models.business import BusinessFact, BusinessTier
from atlas.models.query import DEFAULT_MAX_RESULTS, DEFAULT_MIN_RATING, TenantConfig
from atlas.providers.business.sqlite_candidate_store import SQLiteCandidateStore
from atlas.providers.knowledge.chromadb_provider import ChromaDBKnowledgeProvider
from atlas.providers.tenant.sqlite_tenant_config_provider import SQLiteTenantConfigProvider


class SeedTenant(BaseModel):
    tenant_id: str = Field(min_length=1)
    min_rating: float = DEFAULT_MIN_RATING
    max_results: int = DEFAULT_MAX_RESULTS


class SeedBusiness(BaseModel):
    business_id: str = Field(min_length=1)
    tenant_id: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    rating: float | None = None
    tier: BusinessTier = BusinessTier.UNCLAIMED
    lat: float | None = None
    lng: float | None = None
    facts: list[str] = Field(default_factory=list)

    def to_facts(self) -> list[BusinessFact]:
        return [
            BusinessFact(
                fact_id=f"{self.business_id}:{index}",
                business_id=self.business_id,
                tenant_id=self.tenant_id,
                text=text,
            )
            for index, text in enumerate(self.facts)
            if text.strip()
        ]


class SeedFile(BaseModel):
    tenants: list[SeedTenant] = Field(default_factory=list)
    businesses: list[SeedBusiness] = Field(default_factory=list)


@dataclass(frozen=True)
class SeedResult:
    tenants: int
    businesses: int
    facts_indexed: int


def load_seed_file(path: str | Path) -> SeedFile:
    """Read and validate a seed file (raises ``ValidationError`` / ``OSError``)."""
    with open(path, encoding="utf-8") as f:
        return SeedFile.model_validate(json.load(f))


async def apply_seed(
    seed: SeedFile,
    candidate_store: SQLiteCandidateStore,
    tenant_configs: SQLiteTenantConfigProvider,
    knowledge: ChromaDBKnowledgeProvider | None,
) -> SeedResult:
    """Write *seed* to the stores; facts are skipped when *knowledge* is ``None``."""
    await candidate_store.initialize()
    await tenant_configs.initialize()

    for tenant in seed.tenants:
        await tenant_configs.upsert_tenant_config(
            tenant.tenant_id,
            TenantConfig(min_rating=tenant.min_rating, max_results=tenant.max_results),
        )

    facts: list[BusinessFact] = []
    for business in seed.businesses:
        await candidate_store.upsert_business(
            business_id=business.business_id,
            tenant_id=business.tenant_id,
            display_name=business.display_name,
            tier=business.tier,
            rating=business.rating,
            lat=business.lat,
            lng=business.lng,
        )
        facts.extend(business.to_facts())

    indexed = await knowledge.index_facts(facts) if knowledge is not None and facts else 0
    return SeedResult(
        tenants=len(seed.tenants),
        businesses=len(seed.businesses),
        facts_indexed=indexed,
    )
