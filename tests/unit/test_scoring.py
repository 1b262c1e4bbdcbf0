"""Unit tests for knowledge-match deduplication and candidate id selection."""

from __future__ import annotations

import itertools
import math
from types import SimpleNamespace

from atlas.models.business import KnowledgeMatch
from atlas.services.scoring import candidate_ids, dedupe_matches


def _m(business_id, score) -> KnowledgeMatch:
    return KnowledgeMatch(business_id=business_id, relevance_score=score)


class TestDedupeMatches:
    def test_keeps_max_score_per_business(self) -> None:
        matches = [_m("A", 0.3), _m("A", 0.9), _m("B", 0.5)]
        assert dedupe_matches(matches) == {"A": 0.9, "B": 0.5}

    def test_input_order_does_not_change_values(self) -> None:
        matches = [_m("A", 0.3), _m("A", 0.9), _m("B", 0.5), _m("C", 0.1)]
        expected = {"A": 0.9, "B": 0.5, "C": 0.1}
        for perm in itertools.permutations(matches):
            assert dedupe_matches(perm) == expected

    def test_missing_business_id_skipped(self) -> None:
        matches = [_m(None, 0.99), _m("", 0.8), _m("B", 0.4)]
        assert dedupe_matches(matches) == {"B": 0.4}

    def test_non_numeric_scores_skipped(self) -> None:
        matches = [
            SimpleNamespace(business_id="A", relevance_score="0.9"),
            SimpleNamespace(business_id="A", relevance_score=math.nan),
            SimpleNamespace(business_id="A", relevance_score=True),
            SimpleNamespace(business_id="A", relevance_score=0.2),
        ]
        assert dedupe_matches(matches) == {"A": 0.2}

    def test_empty_input(self) -> None:
        assert dedupe_matches([]) == {}


class TestCandidateIds:
    def test_orders_by_score_and_caps(self) -> None:
        scores = {"A": 0.2, "B": 0.9, "C": 0.5}
        assert candidate_ids(scores, 2) == ["B", "C"]

    def test_ties_keep_first_seen_order(self) -> None:
        scores = {"A": 0.5, "B": 0.5, "C": 0.7}
        assert candidate_ids(scores, 10) == ["C", "A", "B"]

    def test_zero_limit(self) -> None:
        assert candidate_ids({"A": 1.0}, 0) == []
