"""Search-term expansion for short category queries.

Users often type a bare category ("coffee", "bars and pubs").  Those
embed poorly on their own, so the knowledge search gets the category
together with the words businesses actually use to describe themselves.
Anything that is not a known category is searched as typed.
"""

from __future__ import annotations

import re

SEARCH_SYNONYMS: dict[str, list[str]] = {
    "food": ["restaurant", "food", "dining", "eatery", "grill", "kitchen", "bistro", "diner"],
    "restaurants": ["restaurant", "dining", "eatery", "grill", "kitchen", "bistro", "diner"],
    "bars": ["bar", "pub", "tavern", "lounge", "cocktail", "nightlife"],
    "bars and pubs": ["bar", "pub", "tavern", "lounge", "cocktail", "nightlife"],
    "coffee": ["coffee", "cafe", "café", "espresso", "tea"],
    "cafes": ["cafe", "café", "coffee", "bakery", "tea"],
    "drinks": ["bar", "pub", "cocktail", "wine", "brewery"],
    "family": ["family", "kid", "children", "play", "pizza"],
    "cocktails": ["cocktail", "bar", "lounge", "mixology"],
    "nightlife": ["bar", "pub", "nightclub", "club", "lounge", "cocktail"],
    "things to do": ["entertainment", "activity", "attraction", "museum", "theatre", "cinema"],
    "greek": ["greek", "gyro", "souvlaki", "mediterranean"],
    "italian": ["italian", "pizza", "pasta", "trattoria"],
    "indian": ["indian", "curry", "tandoori", "masala"],
    "chinese": ["chinese", "noodle", "dim sum", "wok"],
    "japanese": ["japanese", "sushi", "ramen", "izakaya"],
    "mexican": ["mexican", "taco", "burrito", "cantina"],
    "thai": ["thai", "pad thai", "satay"],
}

_PUNCTUATION = re.compile(r"[?!.,;:'\"()]")


def normalize_query(query_text: str) -> str:
    """Lower-case *query_text* and drop punctuation and extra whitespace."""
    return " ".join(_PUNCTUATION.sub("", query_text).lower().split())


def expand_terms(query_text: str) -> list[str]:
    """Return the search terms for *query_text* (the query itself if unknown)."""
    normalized = normalize_query(query_text)
    return list(SEARCH_SYNONYMS.get(normalized, [normalized] if normalized else []))


def expand_query(query_text: str) -> str:
    """Return the text sent to the knowledge search for *query_text*.

    Known categories become ``"<query> <synonyms...>"``; everything else is
    returned unchanged (stripped).
    """
    normalized = normalize_query(query_text)
    extra = [term for term in expand_terms(query_text) if term != normalized]
    return " ".join([query_text.strip(), *extra])
