"""Inbound query and per-tenant configuration models."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

from atlas.models.business import BoundingBox, Coordinate

# Upper bound on query text; anything longer is not a map search.
MAX_QUERY_LENGTH = 500

DEFAULT_MIN_RATING = 4.4
DEFAULT_MAX_RESULTS = 5


class QueryRequest(BaseModel):
    """One spatial query, already bound to a resolved tenant."""

    model_config = ConfigDict(frozen=True)

    query_text: str = Field(min_length=1, max_length=MAX_QUERY_LENGTH)
    tenant_id: str = Field(min_length=1)
    user_location: Coordinate | None = None
    viewport: BoundingBox | None = None

    @field_validator("query_text")
    @classmethod
    def _strip_query(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("query text must not be blank")
        return stripped

    @field_validator("user_location")
    @classmethod
    def _location_in_range(cls, value: Coordinate | None) -> Coordinate | None:
        if value is None:
            return value
        lat, lng = value.lat, value.lng
        if lat is None or lng is None:
            raise ValueError("userLocation requires both lat and lng")
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise ValueError("userLocation must be finite")
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
            raise ValueError("userLocation is out of range")
        return value


class TenantConfig(BaseModel):
    """Read-only per-tenant tuning supplied by the config store."""

    model_config = ConfigDict(frozen=True)

    min_rating: float = Field(default=DEFAULT_MIN_RATING, ge=0.0, le=5.0)
    max_results: int = Field(default=DEFAULT_MAX_RESULTS, ge=1, le=10)
