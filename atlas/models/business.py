"""Business-side data models: coordinates, tiers, candidates, knowledge matches.

All models are frozen pydantic v2 models.  They are created fresh for each
query and thrown away when the response is sent; nothing here is cached
across requests.

Validation on these models is shallow.  A ``Coordinate`` accepts
``None``, NaN or out-of-range values so that a bad record coming back from a
data source can still be represented, inspected by the eligibility filter,
and rejected there.  Range checks live in
:func:`atlas.services.eligibility.has_valid_coordinates`.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BusinessTier(str, Enum):  # noqa: UP042
    """Paid subscription level of a business.

    Only FEATURED and SPOTLIGHT may ever appear in a spatial response.
    STARTER is the free/unpaid tier and UNCLAIMED businesses have no owner
    at all; both are excluded at the data-source boundary and again by the
    leak guard.
    """

    UNCLAIMED = "unclaimed"
    STARTER = "starter"
    FEATURED = "featured"
    SPOTLIGHT = "spotlight"


class Coordinate(BaseModel):
    """A latitude/longitude pair as delivered by a data source (unvalidated)."""

    model_config = ConfigDict(frozen=True)

    lat: float | None = None
    lng: float | None = None


class BoundingBox(BaseModel):
    """The map viewport the user was looking at when asking."""

    model_config = ConfigDict(frozen=True)

    north: float = Field(ge=-90.0, le=90.0)
    south: float = Field(ge=-90.0, le=90.0)
    east: float = Field(ge=-180.0, le=180.0)
    west: float = Field(ge=-180.0, le=180.0)


class KnowledgeMatch(BaseModel):
    """One scored hit from the semantic knowledge store.

    Several matches can point at the same business (one per indexed fact).
    ``business_id`` may be missing for facts that are not attributable to
    a business; those are dropped by the deduplicator.
    """

    model_config = ConfigDict(frozen=True)

    business_id: str | None = None
    relevance_score: float = Field(default=0.0, ge=0.0, le=1.0)


class BusinessCandidate(BaseModel):
    """A business record returned by the eligibility-scoped fetch."""

    model_config = ConfigDict(frozen=True)

    business_id: str
    display_name: str
    # 0 means "unrated" (a legitimately new business), not ineligible.
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    tier: BusinessTier
    coordinate: Coordinate | None = None

    @field_validator("rating", mode="before")
    @classmethod
    def _null_rating_is_unrated(cls, value: object) -> object:
        return 0.0 if value is None else value


class RankedCandidate(BaseModel):
    """A candidate that survived the leak guard, with its ranking keys."""

    model_config = ConfigDict(frozen=True)

    candidate: BusinessCandidate
    relevance_score: float = 0.0
    # Lower sorts first; None for tiers with no display priority.
    tier_priority: int | None = None

    @property
    def business_id(self) -> str:
        return self.candidate.business_id


class BusinessPin(BaseModel):
    """One marker in the map search listing (``GET /atlas/search``)."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    lat: float
    lng: float
    rating: float = 0.0
    tier: str


class BusinessFact(BaseModel):
    """A short indexed statement about a business ("wood-fired pizza, open late")."""

    model_config = ConfigDict(frozen=True)

    fact_id: str
    business_id: str
    tenant_id: str
    text: str = Field(min_length=1)
