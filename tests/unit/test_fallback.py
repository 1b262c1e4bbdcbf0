"""Unit tests for deterministic fallback responses."""

from __future__ import annotations

import pytest

from atlas.models.pipeline import FallbackReason
from atlas.models.response import UIFocus
from atlas.services.fallback import (
    FALLBACK_AUTO_DISMISS_MS,
    produce_fallback,
    rejection_response,
    status_for,
)


class TestProduceFallback:
    @pytest.mark.parametrize("reason", list(FallbackReason))
    def test_shape_for_every_reason(self, reason) -> None:
        response = produce_fallback(reason)
        assert response.summary
        assert response.business_ids == []
        assert response.primary_business_id is None
        assert response.ui.focus == UIFocus.PINS
        assert response.ui.auto_dismiss_ms == FALLBACK_AUTO_DISMISS_MS == 3500

    def test_all_six_reasons_have_distinct_summaries(self) -> None:
        summaries = {produce_fallback(reason).summary for reason in FallbackReason}
        assert len(FallbackReason) == 6
        assert len(summaries) == 6

    @pytest.mark.parametrize("reason", list(FallbackReason))
    def test_deterministic(self, reason) -> None:
        assert produce_fallback(reason) == produce_fallback(reason)
        assert produce_fallback(reason.value) == produce_fallback(reason)

    def test_unknown_reason_uses_generic_wording(self) -> None:
        response = produce_fallback("solar-flare")
        assert response == produce_fallback(FallbackReason.INTERNAL_ERROR)

    def test_wire_shape(self) -> None:
        wire = produce_fallback(FallbackReason.NO_QUERY_MATCH).to_wire()
        assert wire == {
            "summary": "No nearby matches for that search. Try something different.",
            "businessIds": [],
            "primaryBusinessId": None,
            "ui": {"focus": "pins", "autoDismissMs": 3500},
        }


class TestStatusFor:
    @pytest.mark.parametrize(
        ("reason", "status"),
        [
            (FallbackReason.NO_QUERY_MATCH, 200),
            (FallbackReason.NO_ELIGIBLE_CANDIDATES, 200),
            (FallbackReason.FETCH_ERROR, 500),
            (FallbackReason.MODEL_UNAVAILABLE, 503),
            (FallbackReason.MALFORMED_MODEL_OUTPUT, 500),
            (FallbackReason.INTERNAL_ERROR, 500),
            ("bogus", 500),
        ],
    )
    def test_status(self, reason, status) -> None:
        assert status_for(reason) == status


class TestRejectionResponse:
    def test_uses_given_summary(self) -> None:
        response = rejection_response("Unknown city.")
        assert response.summary == "Unknown city."
        assert response.business_ids == []
        assert response.ui.auto_dismiss_ms == 3500

    def test_blank_summary_falls_back_to_generic(self) -> None:
        response = rejection_response("   ")
        assert response.summary == produce_fallback(FallbackReason.INTERNAL_ERROR).summary

    def test_long_summary_is_trimmed(self) -> None:
        assert len(rejection_response("x" * 500).summary) == 200
