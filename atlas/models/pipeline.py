"""Pipeline result models: fallback reasons and the per-request outcome.

The pipeline never raises to its caller.  It returns an
:class:`AtlasQueryOutcome` that bundles the response body with the status
code the host should use and, when a fallback was produced, the reason.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from atlas.models.response import AtlasResponse


class FallbackReason(str, Enum):  # noqa: UP042
    """Why a deterministic fallback replaced the model-assisted answer."""

    NO_QUERY_MATCH = "no-query-match"
    NO_ELIGIBLE_CANDIDATES = "no-eligible-candidates"
    FETCH_ERROR = "fetch-error"
    MODEL_UNAVAILABLE = "model-unavailable"
    MALFORMED_MODEL_OUTPUT = "malformed-model-output"
    INTERNAL_ERROR = "internal-error"


class AtlasQueryOutcome(BaseModel):
    """What one run of the query pipeline produced."""

    model_config = ConfigDict(frozen=True)

    response: AtlasResponse
    status_code: int = 200
    fallback_reason: FallbackReason | None = None
    # Number of fetched candidates the leak guard stripped on this request.
    leak_violations: int = Field(default=0, ge=0)

    @property
    def is_fallback(self) -> bool:
        return self.fallback_reason is not None
