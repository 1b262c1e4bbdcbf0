"""Unit tests for the factory functions in atlas/main.py.

Covers LLM provider priority, alert sink selection, tenant resolver
construction and full component assembly, with temp-dir stores so no
real network calls or API keys are required.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi import FastAPI

from atlas.config.settings import Settings


# ======================================================================
# Shared helpers
# ======================================================================


def _settings(**overrides) -> Settings:
    """Settings with every provider switched off unless overridden."""
    defaults = {
        "openai_api_key": "",
        "openai_base_url": "",
        "openai_text_model": "",
        "openai_embedding_model": "",
        "anthropic_api_key": "",
        "ollama_base_url": "",
        "alert_webhook_url": "",
        "app_env": "test",
    }
    defaults.update(overrides)
    return Settings(**defaults)


# ======================================================================
# _build_llm_provider
# ======================================================================


class TestBuildLLMProvider:
    """Provider priority: OpenAI, then Anthropic, then Ollama, else None."""

    def test_openai_priority(self) -> None:
        from atlas.main import _build_llm_provider
        from atlas.providers.llm.openai_provider import OpenAILLMProvider

        provider = _build_llm_provider(
            _settings(openai_api_key="sk-test", anthropic_api_key="ak-test")
        )
        assert isinstance(provider, OpenAILLMProvider)

    def test_anthropic_when_no_openai(self) -> None:
        from atlas.main import _build_llm_provider
        from atlas.providers.llm.anthropic_provider import AnthropicLLMProvider

        provider = _build_llm_provider(_settings(anthropic_api_key="ak-test"))
        assert isinstance(provider, AnthropicLLMProvider)

    def test_ollama_only_with_base_url(self) -> None:
        from atlas.main import _build_llm_provider
        from atlas.providers.llm.ollama_provider import OllamaLLMProvider

        provider = _build_llm_provider(_settings(ollama_base_url="http://localhost:11434"))
        assert isinstance(provider, OllamaLLMProvider)

    def test_none_when_nothing_configured(self) -> None:
        from atlas.main import _build_llm_provider

        assert _build_llm_provider(_settings()) is None


# ======================================================================
# _build_alert_sink / _build_tenant_resolver
# ======================================================================


class TestBuildAlertSink:
    @pytest.mark.asyncio
    async def test_log_sink_by_default(self) -> None:
        import httpx

        from atlas.main import _build_alert_sink

        async with httpx.AsyncClient() as client:
            sink = _build_alert_sink(_settings(), client)
        assert sink.get_provider_name() == "log"

    @pytest.mark.asyncio
    async def test_webhook_sink_when_url_set(self) -> None:
        import httpx

        from atlas.main import _build_alert_sink

        async with httpx.AsyncClient() as client:
            sink = _build_alert_sink(
                _settings(alert_webhook_url="https://hooks.example.test/x"), client
            )
        assert sink.get_provider_name() == "webhook"


class TestBuildTenantResolver:
    def test_uses_tenant_section(self) -> None:
        from atlas.main import _build_tenant_resolver

        resolver = _build_tenant_resolver(
            {
                "tenant": {
                    "base_domain": "atlas.test",
                    "fallback_hosts": ["localhost"],
                    "allowed": ["poole"],
                    "dev_default": "",
                }
            }
        )
        assert resolver.resolve("poole.atlas.test", {}) == "poole"
        assert resolver.is_fallback_host("localhost") is True

    def test_empty_config(self) -> None:
        from atlas.main import _build_tenant_resolver

        resolver = _build_tenant_resolver({})
        assert resolver.resolve("poole.example.com", {}) == "poole"


# ======================================================================
# _build_all
# ======================================================================


class TestBuildAll:
    @pytest.mark.asyncio
    async def test_assembles_every_component(self, tmp_path) -> None:
        from atlas.main import _build_all
        from atlas.pipeline.orchestrator import AtlasQueryPipeline

        app_settings = _settings(
            anthropic_api_key="ak-test",
            chromadb_persist_dir=str(tmp_path / "chroma"),
            atlas_db_path=str(tmp_path / "atlas.db"),
        )
        components = _build_all(
            app_settings, {"atlas": {"default_max_results": 3, "model": {"max_tokens": 120}}}
        )
        try:
            assert set(components) == {
                "http_client",
                "primary_llm",
                "primary_llm_name",
                "embedding_provider",
                "knowledge_search",
                "candidate_store",
                "tenant_configs",
                "tenant_resolver",
                "alert_sink",
                "pipeline",
            }
            assert components["primary_llm_name"] == "anthropic"
            assert isinstance(components["pipeline"], AtlasQueryPipeline)
            assert components["pipeline"].model_available is True
            assert components["knowledge_search"].is_available() is False
        finally:
            await components["http_client"].aclose()

    @pytest.mark.asyncio
    async def test_no_model_configured(self, tmp_path) -> None:
        from atlas.main import _build_all

        components = _build_all(
            _settings(
                chromadb_persist_dir=str(tmp_path / "chroma"),
                atlas_db_path=str(tmp_path / "atlas.db"),
            ),
            {},
        )
        try:
            assert components["primary_llm"] is None
            assert components["primary_llm_name"] is None
            assert components["pipeline"].model_available is False
        finally:
            await components["http_client"].aclose()

    @pytest.mark.asyncio
    async def test_search_without_embedding_key_is_fetch_error(self, tmp_path) -> None:
        from atlas.main import _build_all
        from atlas.utils.errors import KnowledgeSearchError

        components = _build_all(
            _settings(
                anthropic_api_key="ak-test",
                chromadb_persist_dir=str(tmp_path / "chroma"),
                atlas_db_path=str(tmp_path / "atlas.db"),
            ),
            {},
        )
        try:
            assert components["embedding_provider"].is_available() is False
            with pytest.raises(KnowledgeSearchError):
                await components["knowledge_search"].search("coffee", "bournemouth", 10)
        finally:
            await components["http_client"].aclose()


# ======================================================================
# create_app
# ======================================================================


class TestCreateApp:
    def test_returns_fastapi_with_routes(self) -> None:
        from atlas.main import create_app

        application = create_app()
        assert isinstance(application, FastAPI)
        paths = {route.path for route in application.routes}
        assert {"/api/v1/atlas/query", "/api/v1/atlas/search", "/api/v1/health"} <= paths

    def test_lifespan_builds_state(self, tmp_path) -> None:
        from fastapi.testclient import TestClient

        import atlas.main as atlas_main

        app_settings = _settings(
            chromadb_persist_dir=str(tmp_path / "chroma"),
            atlas_db_path=str(tmp_path / "atlas.db"),
        )
        with patch.object(atlas_main, "settings", app_settings):
            application = atlas_main.create_app()
            with TestClient(application) as client:
                assert application.state.pipeline.model_available is False
                response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert (tmp_path / "atlas.db").exists()
