"""Atlas domain models -- re-exports all public model classes.

Submodules by concern:
    - business.py  -- tiers, coordinates, candidates, facts, map pins
    - query.py     -- inbound query and tenant configuration
    - response.py  -- the AtlasResponse wire contract
    - pipeline.py  -- fallback reasons and the per-request outcome
"""

from __future__ import annotations

from atlas.models.business import (
    BoundingBox,
    BusinessCandidate,
    BusinessFact,
    BusinessPin,
    BusinessTier,
    Coordinate,
    KnowledgeMatch,
    RankedCandidate,
)
from atlas.models.pipeline import AtlasQueryOutcome, FallbackReason
from atlas.models.query import QueryRequest, TenantConfig
from atlas.models.response import AtlasResponse, AtlasUI, UIFocus

__all__ = [
    # business
    "BoundingBox",
    "BusinessCandidate",
    "BusinessFact",
    "BusinessPin",
    "BusinessTier",
    "Coordinate",
    "KnowledgeMatch",
    "RankedCandidate",
    # query
    "QueryRequest",
    "TenantConfig",
    # response
    "AtlasResponse",
    "AtlasUI",
    "UIFocus",
    # pipeline
    "AtlasQueryOutcome",
    "FallbackReason",
]
