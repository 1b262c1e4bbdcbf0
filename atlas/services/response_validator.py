"""Strict validation of the language model's reply.

The model is asked for the full AtlasResponse shape.  Its reply is accepted
only if every field is present with exactly the right type and within
bounds; one bad field rejects the whole reply.  Types are checked
strictly: ``"3500"`` is not an integer, ``true`` is not a number, and an
empty summary is not a summary.

Returns ``None`` for anything unacceptable so the pipeline can fall back.
It never raises.
"""

from __future__ import annotations

import json
import re
from typing import Literal

import structlog
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from atlas.models.response import AtlasUI, UIFocus
from atlas.services.response_planner import (
    AUTO_DISMISS_MAX_MS,
    AUTO_DISMISS_MIN_MS,
    SUMMARY_MAX_LENGTH,
)
from atlas.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

# A single ```json ... ``` fence around the whole reply.
_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class _ReplyUI(BaseModel):
    model_config = ConfigDict(frozen=True)

    focus: Literal["pins", "route", "detail"]
    auto_dismiss_ms: StrictInt = Field(
        alias="autoDismissMs", ge=AUTO_DISMISS_MIN_MS, le=AUTO_DISMISS_MAX_MS
    )


class ValidatedReply(BaseModel):
    """A model reply that passed every contract check.

    ``business_ids`` and ``primary_business_id`` are kept only so they can
    be logged when discarded; the assembler never uses them.
    """

    model_config = ConfigDict(frozen=True)

    summary: StrictStr
    business_ids: list[StrictStr] = Field(alias="businessIds")
    primary_business_id: StrictStr | None = Field(alias="primaryBusinessId")
    ui: _ReplyUI

    @field_validator("summary")
    @classmethod
    def _summary_bounds(cls, value: str) -> str:
        text = " ".join(value.split())
        if not text:
            raise ValueError("summary must not be empty")
        if len(text) > SUMMARY_MAX_LENGTH:
            raise ValueError(f"summary exceeds {SUMMARY_MAX_LENGTH} characters")
        return text

    def atlas_ui(self) -> AtlasUI:
        return AtlasUI(focus=UIFocus(self.ui.focus), auto_dismiss_ms=self.ui.auto_dismiss_ms)


def _strip_fence(text: str) -> str:
    stripped = text.strip()
    match = _FENCE.match(stripped)
    return match.group(1) if match else stripped


def validate_response(raw: object) -> ValidatedReply | None:
    """Parse and validate the raw model text, or return ``None``."""
    if not isinstance(raw, str) or not raw.strip():
        return None

    try:
        data = json.loads(_strip_fence(raw))
    except (ValueError, RecursionError):
        _logger.debug("model_reply_not_json", preview=raw[:120])
        return None

    if not isinstance(data, dict):
        return None

    try:
        return ValidatedReply.model_validate(data)
    except ValidationError as exc:
        _logger.debug(
            "model_reply_contract_violation",
            errors=[".".join(str(p) for p in err["loc"]) for err in exc.errors()],
        )
        return None
