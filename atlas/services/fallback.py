"""Deterministic fallback responses.

Every branch of the query pipeline that cannot finish normally ends here.
The output depends on the reason code alone, needs no I/O and cannot fail,
so the map UI always gets a renderable AtlasResponse.
"""

from __future__ import annotations

from atlas.models.pipeline import FallbackReason
from atlas.models.response import AtlasResponse, AtlasUI, UIFocus

FALLBACK_AUTO_DISMISS_MS = 3500

_FALLBACK_SUMMARIES: dict[FallbackReason, str] = {
    FallbackReason.NO_QUERY_MATCH: "No nearby matches for that search. Try something different.",
    FallbackReason.NO_ELIGIBLE_CANDIDATES: "No nearby places match that search right now.",
    FallbackReason.FETCH_ERROR: "We couldn't load places right now. Please try again.",
    FallbackReason.MODEL_UNAVAILABLE: "Map search is temporarily unavailable.",
    FallbackReason.MALFORMED_MODEL_OUTPUT: "We couldn't summarise those results. Please try again.",
    FallbackReason.INTERNAL_ERROR: "Something went wrong. Please try again.",
}

_FALLBACK_STATUS: dict[FallbackReason, int] = {
    FallbackReason.NO_QUERY_MATCH: 200,
    FallbackReason.NO_ELIGIBLE_CANDIDATES: 200,
    FallbackReason.FETCH_ERROR: 500,
    FallbackReason.MODEL_UNAVAILABLE: 503,
    FallbackReason.MALFORMED_MODEL_OUTPUT: 500,
    FallbackReason.INTERNAL_ERROR: 500,
}

_GENERIC_SUMMARY = _FALLBACK_SUMMARIES[FallbackReason.INTERNAL_ERROR]


def _fixed_response(summary: str) -> AtlasResponse:
    return AtlasResponse(
        summary=summary,
        business_ids=[],
        primary_business_id=None,
        ui=AtlasUI(focus=UIFocus.PINS, auto_dismiss_ms=FALLBACK_AUTO_DISMISS_MS),
    )


def produce_fallback(reason: FallbackReason | str) -> AtlasResponse:
    """Return the fixed fallback response for *reason*.

    Unknown reason values get the internal-error wording rather than an
    exception.
    """
    try:
        parsed = FallbackReason(reason)
    except ValueError:
        return _fixed_response(_GENERIC_SUMMARY)
    return _fixed_response(_FALLBACK_SUMMARIES[parsed])


def status_for(reason: FallbackReason | str) -> int:
    """HTTP status the host should send alongside a fallback body."""
    try:
        return _FALLBACK_STATUS[FallbackReason(reason)]
    except ValueError:
        return 500


def rejection_response(summary: str) -> AtlasResponse:
    """Fallback-shaped body for requests rejected before the pipeline runs.

    Used for invalid query text and unresolvable tenants, so the UI gets the
    same shape whatever the status code.
    """
    text = " ".join(str(summary).split())[:200] or _GENERIC_SUMMARY
    return _fixed_response(text)
