"""FastAPI routes for the Atlas map assistant.

Endpoint                      Method  Description
/api/v1/atlas/query           POST    Free-text spatial query -> AtlasResponse
/api/v1/atlas/search          GET     Eligible pins for the tenant (?q=, ?limit=)
/api/v1/health                GET     Health check + provider status

The tenant is resolved from the ``Host`` header on every request.  Query
failures always answer with an AtlasResponse body, whatever the status.
"""

from __future__ import annotations

import json
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

import atlas
from atlas.api.schemas import AtlasQueryBody, ErrorResponse, HealthResponse, MapSearchResponse
from atlas.interfaces.tenant_resolver import ITenantResolver
from atlas.models.query import QueryRequest
from atlas.pipeline.orchestrator import AtlasQueryPipeline
from atlas.services.fallback import rejection_response
from atlas.utils.errors import CollaboratorError, InputValidationError, TenantResolutionError
from atlas.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")

_MISSING_QUERY_SUMMARY = "Type what you're looking for to search the map."
_INVALID_QUERY_SUMMARY = "That search couldn't be read. Please try again."


# ---------------------------------------------------------------------------
# Dependency injection helpers: resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_pipeline(request: Request) -> AtlasQueryPipeline:
    return request.app.state.pipeline


def _get_tenant_resolver(request: Request) -> ITenantResolver:
    return request.app.state.tenant_resolver


PipelineDep = Annotated[AtlasQueryPipeline, Depends(_get_pipeline)]
ResolverDep = Annotated[ITenantResolver, Depends(_get_tenant_resolver)]


def _rejection(status_code: int, summary: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=rejection_response(summary).to_wire())


async def _read_query(request: Request, tenant_id: str) -> QueryRequest:
    """Parse the request body into a :class:`QueryRequest` for *tenant_id*.

    Raises
    ------
    InputValidationError
        If the body is not a JSON object, carries no query text, or fails
        field validation.  The message is user-facing.
    """
    try:
        payload: Any = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InputValidationError(message=_INVALID_QUERY_SUMMARY) from exc
    if not isinstance(payload, dict):
        raise InputValidationError(message=_INVALID_QUERY_SUMMARY)

    try:
        body = AtlasQueryBody.model_validate(payload)
    except ValidationError as exc:
        raise InputValidationError(message=_INVALID_QUERY_SUMMARY) from exc

    query_text = body.effective_query()
    if not query_text:
        raise InputValidationError(message=_MISSING_QUERY_SUMMARY)

    try:
        return QueryRequest(
            query_text=query_text,
            tenant_id=tenant_id,
            user_location=body.user_location,
            viewport=body.viewport,
        )
    except ValidationError as exc:
        logger.info(
            "atlas_query_rejected",
            tenant_id=tenant_id,
            fields=[".".join(str(p) for p in err["loc"]) for err in exc.errors()],
        )
        raise InputValidationError(message=_INVALID_QUERY_SUMMARY) from exc


# ---------------------------------------------------------------------------
# Atlas endpoints
# ---------------------------------------------------------------------------


@router.post("/atlas/query", summary="Answer a free-text spatial query")
async def atlas_query(
    request: Request,
    pipeline: PipelineDep,
    resolver: ResolverDep,
) -> JSONResponse:
    """Run the query pipeline and return an AtlasResponse (fallback or not)."""
    try:
        tenant_id = resolver.resolve(request.headers.get("host"), request.query_params)
    except TenantResolutionError as exc:
        return _rejection(exc.status_code, exc.message)

    try:
        query = await _read_query(request, tenant_id)
    except InputValidationError as exc:
        return _rejection(400, exc.message)

    outcome = await pipeline.run(query)
    return JSONResponse(status_code=outcome.status_code, content=outcome.response.to_wire())


@router.get(
    "/atlas/search",
    response_model=MapSearchResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    summary="List every eligible business for the tenant's map",
)
async def atlas_search(
    request: Request,
    pipeline: PipelineDep,
    resolver: ResolverDep,
    q: str = Query(default="", max_length=200),
    limit: int | None = Query(default=None, ge=1),
) -> Any:
    try:
        tenant_id = resolver.resolve(request.headers.get("host"), request.query_params)
    except TenantResolutionError as exc:
        body = ErrorResponse(error=type(exc).__name__, detail=exc.message)
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    try:
        pins = await pipeline.list_pins(tenant_id, name_filter=q, limit=limit)
    except CollaboratorError as exc:
        logger.error("atlas_search_failed", tenant_id=tenant_id, error=str(exc))
        body = ErrorResponse(error="fetch-error", detail="Failed to load businesses")
        return JSONResponse(status_code=500, content=body.model_dump())

    return MapSearchResponse(tenant=tenant_id, businesses=pins, total=len(pins))


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health(request: Request) -> HealthResponse:
    state = request.app.state
    llm = getattr(state, "primary_llm", None)
    knowledge = getattr(state, "knowledge_search", None)
    alert_sink = getattr(state, "alert_sink", None)
    providers: dict[str, Any] = {
        "llm": llm.get_provider_name() if llm else None,
        "llm_available": bool(llm and llm.is_available()),
        "knowledge_search": knowledge.get_provider_name() if knowledge else None,
        "knowledge_search_available": bool(knowledge and knowledge.is_available()),
        "alert_sink": alert_sink.get_provider_name() if alert_sink else None,
    }
    status = "healthy" if providers["llm_available"] else "degraded"
    return HealthResponse(status=status, version=atlas.__version__, providers=providers)
