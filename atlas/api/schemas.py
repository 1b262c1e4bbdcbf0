"""Pydantic request/response schemas for the Atlas HTTP API.

The query endpoint answers with :class:`~atlas.models.response.AtlasResponse`
itself (camelCase on the wire); the schemas here cover the inbound query
body and the auxiliary endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from atlas.models.business import BoundingBox, BusinessPin, Coordinate


class AtlasQueryBody(BaseModel):
    """Inbound body of ``POST /atlas/query``.

    ``queryText`` is the canonical field; ``message`` is accepted from older
    chat clients.  Any ``tenantId`` (or other unknown key) in the body is
    ignored: the tenant always comes from the request host.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    query_text: str | None = None
    message: str | None = None
    user_location: Coordinate | None = None
    viewport: BoundingBox | None = None

    def effective_query(self) -> str:
        for value in (self.query_text, self.message):
            if isinstance(value, str) and value.strip():
                return value
        return ""


class MapSearchResponse(BaseModel):
    """Response of ``GET /atlas/search``: every eligible pin for the tenant."""

    tenant: str
    businesses: list[BusinessPin] = Field(default_factory=list)
    total: int = 0


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body for non-query endpoints."""

    error: str
    detail: str | None = None
