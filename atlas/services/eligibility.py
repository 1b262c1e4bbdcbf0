"""Eligibility rules for spatial responses.

A business may appear on the map only when it is on a paid tier and has a
usable coordinate.  Nothing else (rating, name, relevance) takes part in
the decision; the minimum-rating threshold belongs to the fetch scoping
step, because a zero rating just means "new business".

These functions are pure and total.  They are called on records that came
back from an external data source, so they never assume the input is
well-formed: anything unexpected simply makes the candidate ineligible.
"""

from __future__ import annotations

import math
from typing import Any

from atlas.models.business import BusinessTier

# Display priority for tiers allowed on the map (lower = shown first).
# A tier missing from this map is never eligible.
_TIER_PRIORITY: dict[BusinessTier, int] = {
    BusinessTier.SPOTLIGHT: 0,
    BusinessTier.FEATURED: 1,
}

ELIGIBLE_TIERS: frozenset[BusinessTier] = frozenset(_TIER_PRIORITY)


def _as_tier(value: Any) -> BusinessTier | None:
    if isinstance(value, BusinessTier):
        return value
    if isinstance(value, str):
        try:
            return BusinessTier(value.strip().lower())
        except ValueError:
            return None
    return None


def tier_priority(tier: Any) -> int | None:
    """Return the display priority for *tier*, or ``None`` if it has none."""
    parsed = _as_tier(tier)
    if parsed is None:
        return None
    return _TIER_PRIORITY.get(parsed)


def is_eligible_tier(tier: Any) -> bool:
    return _as_tier(tier) in ELIGIBLE_TIERS


def _is_real_number(value: Any) -> bool:
    # bool is an int subclass; True/False are not coordinates.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def has_valid_coordinates(lat: Any, lng: Any) -> bool:
    """Return ``True`` when *lat*/*lng* are finite numbers in WGS84 range."""
    if not (_is_real_number(lat) and _is_real_number(lng)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


def is_eligible(candidate: Any) -> bool:
    """Decide whether *candidate* may ever appear in a spatial response.

    Accepts a :class:`~atlas.models.business.BusinessCandidate` or any
    object exposing ``tier`` and ``coordinate`` (with ``lat``/``lng``).
    Returns ``False`` instead of raising for anything malformed.
    """
    tier = getattr(candidate, "tier", None)
    if not is_eligible_tier(tier):
        return False
    coordinate = getattr(candidate, "coordinate", None)
    if coordinate is None:
        return False
    return has_valid_coordinates(
        getattr(coordinate, "lat", None),
        getattr(coordinate, "lng", None),
    )
