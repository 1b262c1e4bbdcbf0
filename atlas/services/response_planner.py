"""Prompt construction for the summary call.

The model gets the least it needs to write one short sentence: display
names, a rounded rating and a human tier label.  Coordinates, business ids
and internal enum values never enter the prompt, so the model cannot echo
them back.  Free text (names, the user's query) is flattened and trimmed
before it is interpolated.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from atlas.models.business import BusinessTier, RankedCandidate

SUMMARY_MAX_LENGTH = 200

# Bounds for ui.autoDismissMs; the prompt states them and the validator enforces them.
AUTO_DISMISS_MIN_MS = 2_000
AUTO_DISMISS_MAX_MS = 8_000

_MAX_NAME_LENGTH = 80
_MAX_QUERY_LENGTH = 200

_TIER_LABELS: dict[BusinessTier, str] = {
    BusinessTier.SPOTLIGHT: "Spotlight",
    BusinessTier.FEATURED: "Featured",
}

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_QUOTES = re.compile(r"[\"`]")

ATLAS_SYSTEM_PROMPT = (
    "You are Atlas, the map assistant for {tenant}. A user searched the map and the "
    "places listed in the user message are already pinned for them, in order.\n\n"
    "Write ONE short, friendly sentence (under {max_len} characters) that summarises "
    "what was found. Mention at most two place names, and only names from the list. "
    "Do not invent places, addresses, distances, opening hours or prices.\n\n"
    "Respond with JSON only, exactly in this shape:\n"
    '{{"summary": "your sentence", "businessIds": [], "primaryBusinessId": null, '
    '"ui": {{"focus": "pins", "autoDismissMs": 4200}}}}\n\n'
    '"focus" must be one of "pins", "route" or "detail". "autoDismissMs" must be a '
    "whole number of milliseconds between {dismiss_min} and {dismiss_max}."
)


@dataclass(frozen=True)
class PromptPlan:
    """System and user prompt for one summary call."""

    system_prompt: str
    user_prompt: str


def clean_text(value: str, max_length: int) -> str:
    """Flatten *value* to a single prompt-safe line of at most *max_length* chars."""
    text = _CONTROL_CHARS.sub(" ", str(value))
    text = _QUOTES.sub("", text)
    text = " ".join(text.split())
    return text[:max_length].rstrip()


def tier_label(tier: BusinessTier) -> str:
    return _TIER_LABELS.get(tier, "Local")


def format_rating(rating: float) -> str:
    """``4.56 -> "4.6★"``; unrated businesses read as ``"new"``."""
    if not rating or rating <= 0:
        return "new"
    return f"{round(rating, 1):.1f}★"


def _tenant_display_name(tenant_id: str) -> str:
    name = clean_text(tenant_id.replace("-", " ").replace("_", " "), 60)
    return name.title() or "this city"


def plan_prompt(
    query_text: str,
    candidates: Sequence[RankedCandidate],
    tenant_id: str,
) -> PromptPlan:
    """Build the prompts for summarising *candidates* for *query_text*."""
    system_prompt = ATLAS_SYSTEM_PROMPT.format(
        tenant=_tenant_display_name(tenant_id),
        max_len=SUMMARY_MAX_LENGTH,
        dismiss_min=AUTO_DISMISS_MIN_MS,
        dismiss_max=AUTO_DISMISS_MAX_MS,
    )

    lines = []
    for index, ranked in enumerate(candidates, start=1):
        candidate = ranked.candidate
        name = clean_text(candidate.display_name, _MAX_NAME_LENGTH) or "Unnamed place"
        lines.append(
            f"{index}. {name} ({tier_label(candidate.tier)}, {format_rating(candidate.rating)})"
        )

    user_prompt = (
        f'User query: "{clean_text(query_text, _MAX_QUERY_LENGTH)}"\n\n'
        f"Found {len(candidates)} places:\n"
        + "\n".join(lines)
        + "\n\nGenerate a SHORT, helpful summary."
    )
    return PromptPlan(system_prompt=system_prompt, user_prompt=user_prompt)
