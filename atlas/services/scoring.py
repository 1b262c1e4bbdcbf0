"""Collapse knowledge-store matches into one relevance score per business.

A business is usually indexed as several facts (menu, hours, vibe, ...),
so one query can hit it many times.  Only its best hit counts.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

from atlas.models.business import KnowledgeMatch


def dedupe_matches(matches: Iterable[KnowledgeMatch]) -> dict[str, float]:
    """Return ``{business_id: max relevance_score}`` over *matches*.

    Matches without a business id cannot be surfaced and are skipped, as
    are scores that are not finite numbers.  The resulting values do not
    depend on input order; key order is first-seen order.
    """
    scores: dict[str, float] = {}
    for match in matches:
        business_id = getattr(match, "business_id", None)
        if not business_id:
            continue
        score = getattr(match, "relevance_score", None)
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            continue
        if not math.isfinite(score):
            continue
        current = scores.get(business_id)
        if current is None or score > current:
            scores[business_id] = float(score)
    return scores


def candidate_ids(scores: Mapping[str, float], limit: int) -> list[str]:
    """Return up to *limit* ids, best score first, ties in first-seen order."""
    if limit <= 0:
        return []
    ordered = sorted(scores, key=lambda business_id: -scores[business_id])
    return ordered[:limit]
