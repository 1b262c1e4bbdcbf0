"""Post-fetch leak guard.

The candidate store is structurally scoped to paid tiers with coordinates,
so in a healthy system this guard never finds anything.  It still runs on
every request: a violation here means the upstream scoping is broken, and
the offending record must not get anywhere near ranking or the response.

:func:`guard` only partitions; raising the alert is the pipeline's job
(see :meth:`atlas.pipeline.orchestrator.AtlasQueryPipeline._report_leaks`)
so that this module stays free of I/O.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from atlas.models.business import BusinessCandidate
from atlas.services.eligibility import is_eligible


@dataclass(frozen=True)
class LeakGuardResult:
    """Partition of fetched candidates into safe and violating records."""

    safe: list[BusinessCandidate] = field(default_factory=list)
    violations: list[BusinessCandidate] = field(default_factory=list)

    @property
    def has_violations(self) -> bool:
        return bool(self.violations)


def guard(candidates: Iterable[BusinessCandidate]) -> LeakGuardResult:
    """Re-check every fetched candidate against the eligibility filter.

    Survivors keep their original fetch order, which the ranker relies on
    for its final tie-break.
    """
    safe: list[BusinessCandidate] = []
    violations: list[BusinessCandidate] = []
    for candidate in candidates:
        if is_eligible(candidate):
            safe.append(candidate)
        else:
            violations.append(candidate)
    return LeakGuardResult(safe=safe, violations=violations)


def describe_violation(candidate: object) -> dict[str, object]:
    """Summarise a violating record for an alert without leaking coordinates."""
    tier = getattr(candidate, "tier", None)
    coordinate = getattr(candidate, "coordinate", None)
    return {
        "business_id": getattr(candidate, "business_id", None),
        "tier": getattr(tier, "value", tier),
        "has_coordinate": coordinate is not None
        and getattr(coordinate, "lat", None) is not None
        and getattr(coordinate, "lng", None) is not None,
    }
