"""Unit tests for final response assembly."""

from __future__ import annotations

from atlas.models.business import BusinessTier
from atlas.models.response import UIFocus
from atlas.services.ranker import rank_candidates
from atlas.services.response_assembler import assemble_response
from atlas.services.response_validator import validate_response


class TestAssembleResponse:
    def test_ids_come_from_pipeline_not_model(self, candidate_factory, reply_factory) -> None:
        ranked = rank_candidates(
            [
                candidate_factory("biz-1"),
                candidate_factory("biz-2", tier=BusinessTier.SPOTLIGHT),
            ],
            {},
        )
        reply = validate_response(
            reply_factory(business_ids=["starter-leak", "biz-1"], primary="starter-leak")
        )
        response = assemble_response(reply, ranked)
        assert response.business_ids == ["biz-2", "biz-1"]
        assert response.primary_business_id == "biz-2"
        assert "starter-leak" not in response.to_wire()["businessIds"]

    def test_summary_and_ui_from_model(self, candidate_factory, reply_factory) -> None:
        ranked = rank_candidates([candidate_factory()], {})
        reply = validate_response(
            reply_factory(summary="Great sushi by the pier.", focus="route", auto_dismiss_ms=5000)
        )
        response = assemble_response(reply, ranked)
        assert response.summary == "Great sushi by the pier."
        assert response.ui.focus == UIFocus.ROUTE
        assert response.ui.auto_dismiss_ms == 5000

    def test_empty_candidates(self, reply_factory) -> None:
        reply = validate_response(reply_factory())
        response = assemble_response(reply, [])
        assert response.business_ids == []
        assert response.primary_business_id is None
