"""Integration tests for the Atlas HTTP endpoints using TestClient.

The app is assembled without the production lifespan: a real pipeline and
hostname resolver are placed on ``app.state`` with mocked collaborators.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from atlas.api.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware
from atlas.api.routes import router as api_router
from atlas.models.business import BusinessTier
from atlas.models.pipeline import FallbackReason
from atlas.models.query import TenantConfig
from atlas.pipeline.orchestrator import AtlasQueryPipeline
from atlas.providers.tenant.hostname_resolver import HostnameTenantResolver
from atlas.services.fallback import produce_fallback
from atlas.utils.errors import CandidateFetchError, ConfigurationError

_TENANT_HOST = "http://bournemouth.atlas.test"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app(
    mock_llm,
    mock_knowledge_search,
    mock_candidate_store,
    mock_tenant_configs,
    mock_alert_sink,
) -> FastAPI:
    application = FastAPI()
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    application.include_router(api_router)

    application.state.pipeline = AtlasQueryPipeline(
        llm=mock_llm,
        knowledge_search=mock_knowledge_search,
        candidate_store=mock_candidate_store,
        tenant_configs=mock_tenant_configs,
        alert_sink=mock_alert_sink,
    )
    application.state.tenant_resolver = HostnameTenantResolver(
        base_domain="atlas.test",
        fallback_hosts=["localhost", "testserver"],
    )
    application.state.primary_llm = mock_llm
    application.state.knowledge_search = mock_knowledge_search
    application.state.alert_sink = mock_alert_sink
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, base_url=_TENANT_HOST)


def _assert_fallback_shape(body: dict) -> None:
    assert set(body) == {"summary", "businessIds", "primaryBusinessId", "ui"}
    assert body["businessIds"] == []
    assert body["primaryBusinessId"] is None
    assert body["ui"] == {"focus": "pins", "autoDismissMs": 3500}


# ---------------------------------------------------------------------------
# POST /api/v1/atlas/query
# ---------------------------------------------------------------------------


class TestAtlasQuery:
    def test_answered_query(self, client, mock_knowledge_search) -> None:
        response = client.post("/api/v1/atlas/query", json={"queryText": "sushi"})

        assert response.status_code == 200
        body = response.json()
        assert body["businessIds"] == ["biz-2", "biz-1"]
        assert body["primaryBusinessId"] == "biz-2"
        assert mock_knowledge_search.search.call_args.args[1] == "bournemouth"

    def test_message_field_accepted(self, client) -> None:
        response = client.post("/api/v1/atlas/query", json={"message": "sushi"})
        assert response.status_code == 200

    def test_body_tenant_is_ignored(self, client, mock_knowledge_search) -> None:
        client.post("/api/v1/atlas/query", json={"queryText": "sushi", "tenantId": "poole"})
        assert mock_knowledge_search.search.call_args.args[1] == "bournemouth"

    def test_missing_query(self, client, mock_knowledge_search) -> None:
        response = client.post("/api/v1/atlas/query", json={"queryText": "   "})

        assert response.status_code == 400
        _assert_fallback_shape(response.json())
        mock_knowledge_search.search.assert_not_called()

    def test_unparseable_body(self, client) -> None:
        response = client.post(
            "/api/v1/atlas/query",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        _assert_fallback_shape(response.json())

    def test_non_object_body(self, client) -> None:
        response = client.post("/api/v1/atlas/query", json=["sushi"])
        assert response.status_code == 400

    def test_invalid_user_location(self, client) -> None:
        response = client.post(
            "/api/v1/atlas/query",
            json={"queryText": "sushi", "userLocation": {"lat": 95.0, "lng": 0.0}},
        )
        assert response.status_code == 400
        _assert_fallback_shape(response.json())

    def test_overlong_query(self, client) -> None:
        response = client.post("/api/v1/atlas/query", json={"queryText": "x" * 600})
        assert response.status_code == 400

    def test_no_match_is_200_fallback(self, client, mock_knowledge_search) -> None:
        mock_knowledge_search.search.return_value = []
        response = client.post("/api/v1/atlas/query", json={"queryText": "qwertyxyz"})

        assert response.status_code == 200
        assert response.json() == produce_fallback(FallbackReason.NO_QUERY_MATCH).to_wire()

    def test_malformed_model_output_is_500_fallback(self, client, mock_llm) -> None:
        mock_llm.complete.return_value = "not json at all"
        response = client.post("/api/v1/atlas/query", json={"queryText": "sushi"})

        assert response.status_code == 500
        assert response.json() == produce_fallback(FallbackReason.MALFORMED_MODEL_OUTPUT).to_wire()

    def test_no_model_is_503(self, app, client) -> None:
        pipeline = app.state.pipeline
        pipeline._llm = None
        response = client.post("/api/v1/atlas/query", json={"queryText": "sushi"})

        assert response.status_code == 503
        assert response.json() == produce_fallback(FallbackReason.MODEL_UNAVAILABLE).to_wire()


class TestTenantResolution:
    def test_unknown_host_is_400(self, app) -> None:
        client = TestClient(app, base_url="http://atlas.test")
        response = client.post("/api/v1/atlas/query", json={"queryText": "sushi"})

        assert response.status_code == 400
        _assert_fallback_shape(response.json())

    def test_override_on_tenant_host_is_403(self, client, mock_knowledge_search) -> None:
        response = client.post("/api/v1/atlas/query?city=poole", json={"queryText": "sushi"})

        assert response.status_code == 403
        _assert_fallback_shape(response.json())
        mock_knowledge_search.search.assert_not_called()

    def test_override_on_dev_host(self, app, mock_knowledge_search) -> None:
        client = TestClient(app, base_url="http://localhost:8000")
        response = client.post("/api/v1/atlas/query?city=poole", json={"queryText": "sushi"})

        assert response.status_code == 200
        assert mock_knowledge_search.search.call_args.args[1] == "poole"


# ---------------------------------------------------------------------------
# GET /api/v1/atlas/search
# ---------------------------------------------------------------------------


class TestAtlasSearch:
    def test_lists_guarded_pins(self, client, mock_candidate_store, candidate_factory) -> None:
        mock_candidate_store.list_for_map.return_value = [
            candidate_factory("biz-2", "Sakura House", 4.8, BusinessTier.SPOTLIGHT),
            candidate_factory("starter-1", "Corner Cafe", 4.9, BusinessTier.STARTER),
            candidate_factory("biz-1", "Harbour Sushi", 4.6, BusinessTier.FEATURED),
        ]
        response = client.get("/api/v1/atlas/search")

        assert response.status_code == 200
        body = response.json()
        assert body["tenant"] == "bournemouth"
        assert body["total"] == 2
        assert [b["id"] for b in body["businesses"]] == ["biz-2", "biz-1"]
        assert body["businesses"][0]["tier"] == "Spotlight"

    def test_query_and_limit_forwarded(
        self, client, mock_candidate_store, mock_tenant_configs
    ) -> None:
        mock_tenant_configs.get.return_value = TenantConfig(min_rating=4.6, max_results=5)
        response = client.get("/api/v1/atlas/search", params={"q": "sushi", "limit": "200"})

        assert response.status_code == 200
        kwargs = mock_candidate_store.list_for_map.call_args.kwargs
        assert kwargs["name_filter"] == "sushi"
        assert kwargs["limit"] == 50
        assert kwargs["min_rating"] == 4.6

    def test_rejects_non_positive_limit(self, client, mock_candidate_store) -> None:
        response = client.get("/api/v1/atlas/search", params={"limit": "0"})

        assert response.status_code == 422
        mock_candidate_store.list_for_map.assert_not_called()

    def test_tenant_error(self, app) -> None:
        client = TestClient(app, base_url="http://atlas.test")
        response = client.get("/api/v1/atlas/search")

        assert response.status_code == 400
        assert response.json()["error"] == "TenantResolutionError"

    def test_store_failure(self, client, mock_candidate_store) -> None:
        mock_candidate_store.list_for_map.side_effect = CandidateFetchError("db locked")
        response = client.get("/api/v1/atlas/search")

        assert response.status_code == 500
        assert response.json()["error"] == "fetch-error"

    def test_stray_atlas_error_gets_fallback_body(self, client, mock_candidate_store) -> None:
        mock_candidate_store.list_for_map.side_effect = ConfigurationError("bad config")
        response = client.get("/api/v1/atlas/search")

        assert response.status_code == 500
        assert response.json() == produce_fallback(FallbackReason.INTERNAL_ERROR).to_wire()


# ---------------------------------------------------------------------------
# GET /api/v1/health
# ---------------------------------------------------------------------------


class TestHealth:
    def test_healthy(self, client) -> None:
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["providers"]["llm"] == "mock-llm"
        assert body["providers"]["alert_sink"] == "mock-alert"

    def test_degraded_without_model(self, app, client) -> None:
        app.state.primary_llm = None
        body = client.get("/api/v1/health").json()
        assert body["status"] == "degraded"
        assert body["providers"]["llm_available"] is False

    def test_knowledge_search_unavailable(self, client, mock_knowledge_search) -> None:
        mock_knowledge_search.is_available.return_value = False
        body = client.get("/api/v1/health").json()
        assert body["providers"]["knowledge_search_available"] is False


def test_health_without_state() -> None:
    application = FastAPI()
    application.include_router(api_router)
    application.state.pipeline = MagicMock()
    body = TestClient(application).get("/api/v1/health").json()
    assert body["status"] == "degraded"
