"""Unit tests for category query expansion."""

from __future__ import annotations

from atlas.services.query_expansion import (
    SEARCH_SYNONYMS,
    expand_query,
    expand_terms,
    normalize_query,
)


class TestNormalizeQuery:
    def test_lowercases_and_strips_punctuation(self) -> None:
        assert normalize_query("  Coffee?! ") == "coffee"

    def test_collapses_whitespace(self) -> None:
        assert normalize_query("Bars   and\tPubs") == "bars and pubs"


class TestExpandTerms:
    def test_known_category(self) -> None:
        assert expand_terms("Coffee") == SEARCH_SYNONYMS["coffee"]

    def test_unknown_query(self) -> None:
        assert expand_terms("Vegan Brunch!") == ["vegan brunch"]

    def test_empty(self) -> None:
        assert expand_terms("?!") == []


class TestExpandQuery:
    def test_category_gets_synonyms_without_repeating_itself(self) -> None:
        expanded = expand_query("coffee")
        assert expanded.startswith("coffee ")
        assert expanded.split().count("coffee") == 1
        assert "espresso" in expanded

    def test_multiword_category(self) -> None:
        assert "tavern" in expand_query("Bars and pubs")

    def test_free_text_unchanged(self) -> None:
        assert expand_query("  quiet place for a date  ") == "quiet place for a date"

    def test_every_category_carries_its_terms(self) -> None:
        for category in SEARCH_SYNONYMS:
            expanded = expand_query(category)
            for term in expand_terms(category):
                assert term in expanded
