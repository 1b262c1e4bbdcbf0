"""Atlas FastAPI application entry point.

Wires providers, the query pipeline and routes together via dependency
injection.  Configuration comes from ``.env`` and ``config/config.yaml``;
every collaborator is built once in the lifespan and stored on
``app.state``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

import atlas
from atlas.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from atlas.api.routes import router as api_router
from atlas.config.loader import load_config
from atlas.config.settings import Settings
from atlas.interfaces.alert_sink import IAlertSink
from atlas.interfaces.llm_provider import ILLMProvider
from atlas.pipeline.orchestrator import AtlasQueryPipeline, PipelineOptions
from atlas.providers.alert.log_alert_sink import LogAlertSink
from atlas.providers.alert.webhook_alert_sink import WebhookAlertSink
from atlas.providers.business.sqlite_candidate_store import SQLiteCandidateStore
from atlas.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from atlas.providers.knowledge.chromadb_provider import ChromaDBKnowledgeProvider
from atlas.providers.llm.anthropic_provider import AnthropicLLMProvider
from atlas.providers.llm.ollama_provider import OllamaLLMProvider
from atlas.providers.llm.openai_provider import OpenAILLMProvider
from atlas.providers.tenant.hostname_resolver import HostnameTenantResolver
from atlas.providers.tenant.sqlite_tenant_config_provider import SQLiteTenantConfigProvider
from atlas.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------


def _build_llm_provider(app_settings: Settings) -> ILLMProvider | None:
    """Select the first configured LLM provider.

    Priority order: OpenAI -> Anthropic -> Ollama (only when a base URL is
    set).  Returns ``None`` when nothing is configured; queries then get
    the model-unavailable fallback.
    """
    if app_settings.openai_api_key:
        return OpenAILLMProvider(settings=app_settings)
    if app_settings.anthropic_api_key:
        return AnthropicLLMProvider(settings=app_settings)
    if app_settings.ollama_base_url:
        return OllamaLLMProvider(settings=app_settings)
    return None


def _build_alert_sink(app_settings: Settings, http_client: httpx.AsyncClient) -> IAlertSink:
    """Webhook sink when ``ALERT_WEBHOOK_URL`` is set, otherwise critical logs."""
    if app_settings.alert_webhook_url:
        return WebhookAlertSink(webhook_url=app_settings.alert_webhook_url, client=http_client)
    return LogAlertSink()


def _build_tenant_resolver(app_config: dict[str, Any]) -> HostnameTenantResolver:
    tenant_cfg = app_config.get("tenant", {})
    return HostnameTenantResolver(
        base_domain=tenant_cfg.get("base_domain", ""),
        fallback_hosts=tenant_cfg.get("fallback_hosts", ()),
        dev_default_tenant=tenant_cfg.get("dev_default", ""),
        allowed_tenants=tenant_cfg.get("allowed", ()),
    )


def _build_all(app_settings: Settings, app_config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Construct every provider plus the pipeline.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    app_config = app_config if app_config is not None else config

    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=10.0)

    # -- Model --
    primary_llm = _build_llm_provider(app_settings)

    # -- Knowledge search --
    embedding_provider = OpenAIEmbeddingProvider(settings=app_settings)
    knowledge_search = ChromaDBKnowledgeProvider(
        embedding_provider=embedding_provider,
        persist_directory=app_settings.chromadb_persist_dir,
        collection_name=app_settings.chromadb_collection,
    )

    # -- Business + tenant stores (same SQLite file) --
    candidate_store = SQLiteCandidateStore(db_path=app_settings.atlas_db_path)
    tenant_configs = SQLiteTenantConfigProvider(db_path=app_settings.atlas_db_path)

    alert_sink = _build_alert_sink(app_settings, http_client)

    pipeline = AtlasQueryPipeline(
        llm=primary_llm,
        knowledge_search=knowledge_search,
        candidate_store=candidate_store,
        tenant_configs=tenant_configs,
        alert_sink=alert_sink,
        options=PipelineOptions.from_config(app_config),
    )

    return {
        "http_client": http_client,
        "primary_llm": primary_llm,
        "primary_llm_name": primary_llm.get_provider_name() if primary_llm else None,
        "embedding_provider": embedding_provider,
        "knowledge_search": knowledge_search,
        "candidate_store": candidate_store,
        "tenant_configs": tenant_configs,
        "tenant_resolver": _build_tenant_resolver(app_config),
        "alert_sink": alert_sink,
        "pipeline": pipeline,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers on startup, clean up on shutdown."""
    components = _build_all(settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    await components["candidate_store"].initialize()
    await components["tenant_configs"].initialize()

    if components["primary_llm"] is None:
        _logger.warning("no_llm_configured", detail="queries will answer 503")

    _logger.info(
        "app_startup",
        version=atlas.__version__,
        environment=settings.app_env,
        primary_llm=components["primary_llm_name"],
        alert_sink=components["alert_sink"].get_provider_name(),
    )

    yield

    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="Atlas API",
        version=atlas.__version__,
        description=(
            "Map assistant backend: answers free-text spatial queries with a "
            "short summary and a ranked list of eligible businesses."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=Settings.split_csv(settings.cors_origins))

    application.include_router(api_router)
    return application


app = create_app()

# ---------------------------------------------------------------------------
# Server entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "atlas.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
