"""Deterministic ranking of eligible candidates.

Order, most significant first:

1. tier priority ascending (SPOTLIGHT before FEATURED),
2. rating descending (unrated businesses last within their tier),
3. relevance score descending (missing score counts as 0).

Anything still tied keeps its fetch order; ``sorted`` is stable, so the
same input always produces the same output.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

from atlas.models.business import BusinessCandidate, RankedCandidate
from atlas.services.eligibility import tier_priority

# Sort key for tiers without a display priority; sorts after every real tier.
_NO_PRIORITY = 1_000


def _finite_or_zero(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value) if math.isfinite(value) else 0.0


def _sort_key(ranked: RankedCandidate) -> tuple[int, float, float]:
    priority = _NO_PRIORITY if ranked.tier_priority is None else ranked.tier_priority
    return (
        priority,
        -_finite_or_zero(ranked.candidate.rating),
        -_finite_or_zero(ranked.relevance_score),
    )


def rank_candidates(
    candidates: Iterable[BusinessCandidate],
    scores: Mapping[str, float],
) -> list[RankedCandidate]:
    """Attach ranking keys to *candidates* and return them in display order."""
    ranked = [
        RankedCandidate(
            candidate=candidate,
            relevance_score=_finite_or_zero(scores.get(candidate.business_id, 0.0)),
            tier_priority=tier_priority(candidate.tier),
        )
        for candidate in candidates
    ]
    return sorted(ranked, key=_sort_key)


def select_top(ranked: list[RankedCandidate], max_results: int) -> list[RankedCandidate]:
    """Truncate *ranked* to the tenant's result budget."""
    if max_results <= 0:
        return []
    return ranked[:max_results]
