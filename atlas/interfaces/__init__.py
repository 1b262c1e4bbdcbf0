"""Public interface definitions for every Atlas collaborator.

The query pipeline talks to the outside world only through these abstract
base classes.  Concrete adapters live in ``atlas/providers/`` and are
wired together in ``atlas/main.py`` at startup.

CONCRETE PROVIDER MAP:
    Interface                  ->  Concrete implementations (in atlas/providers/)
    ILLMProvider               ->  OpenAILLMProvider, AnthropicLLMProvider,
                                   OllamaLLMProvider
    IEmbeddingProvider         ->  OpenAIEmbeddingProvider
    IKnowledgeSearchProvider   ->  ChromaDBKnowledgeProvider
    ICandidateStore            ->  SQLiteCandidateStore
    ITenantConfigProvider      ->  SQLiteTenantConfigProvider
    ITenantResolver            ->  HostnameTenantResolver
    IAlertSink                 ->  LogAlertSink, WebhookAlertSink
"""

from atlas.interfaces.alert_sink import IAlertSink
from atlas.interfaces.candidate_store import ICandidateStore
from atlas.interfaces.embedding_provider import IEmbeddingProvider
from atlas.interfaces.knowledge_search_provider import IKnowledgeSearchProvider
from atlas.interfaces.llm_provider import ILLMProvider
from atlas.interfaces.tenant_config_provider import ITenantConfigProvider
from atlas.interfaces.tenant_resolver import ITenantResolver

__all__ = [
    "IAlertSink",
    "ICandidateStore",
    "IEmbeddingProvider",
    "IKnowledgeSearchProvider",
    "ILLMProvider",
    "ITenantConfigProvider",
    "ITenantResolver",
]
