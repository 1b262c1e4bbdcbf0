"""Wire contract for the map assistant: AtlasResponse and its parts.

The JSON shape is camelCase (``businessIds``, ``primaryBusinessId``,
``autoDismissMs``); Python code uses snake_case attribute names.  Models are
built with ``populate_by_name`` so either spelling works on input, and
:meth:`AtlasResponse.to_wire` always emits the camelCase form.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class UIFocus(str, Enum):  # noqa: UP042
    """What the map should emphasise when rendering the response bubble."""

    PINS = "pins"
    ROUTE = "route"
    DETAIL = "detail"


class AtlasUI(BaseModel):
    """Rendering hints for the ephemeral map bubble."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    focus: UIFocus = UIFocus.PINS
    auto_dismiss_ms: int = Field(default=3500, gt=0)


class AtlasResponse(BaseModel):
    """The response returned for every spatial query, fallback or not.

    ``business_ids`` only ever holds ids computed by the pipeline's own
    ranking of eligible candidates, and ``primary_business_id`` is either
    ``None`` or the first of them.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    summary: str = Field(min_length=1)
    business_ids: list[str] = Field(default_factory=list)
    primary_business_id: str | None = None
    ui: AtlasUI = Field(default_factory=AtlasUI)

    @model_validator(mode="after")
    def _primary_is_first(self) -> AtlasResponse:
        if self.primary_business_id is not None:
            if not self.business_ids or self.business_ids[0] != self.primary_business_id:
                raise ValueError("primaryBusinessId must equal businessIds[0]")
        return self

    def to_wire(self) -> dict[str, Any]:
        """Return the camelCase JSON-ready dict sent to the map UI."""
        return self.model_dump(mode="json", by_alias=True)
