"""Application settings loaded from environment variables via pydantic-settings.

Two sources, highest priority first:

  1. Environment variables, e.g. ``OPENAI_API_KEY=sk-abc123``
  2. ``.env`` in the working directory (local development)

Field ``openai_api_key`` maps to env var ``OPENAI_API_KEY``.  Empty strings
mean "not configured"; ``main.py`` skips providers whose key is empty.
Use ``.env.example`` as the template.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Atlas application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === LLM Providers ===
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible endpoint (TogetherAI, etc.)
    openai_text_model: str = ""  # defaults to gpt-4o-mini
    openai_embedding_model: str = ""  # defaults to text-embedding-3-small
    anthropic_api_key: str = ""
    anthropic_model: str = ""  # defaults to claude-3-5-haiku-latest
    # Empty disables Ollama; a missing model must never look configured.
    ollama_base_url: str = ""
    ollama_model: str = "llama3.1"

    # === Knowledge store ===
    chromadb_persist_dir: str = "./data/chromadb"
    chromadb_collection: str = "atlas_business_facts"

    # === Business + tenant store ===
    atlas_db_path: str = "data/atlas.db"

    # === Tenant resolution ===
    tenant_base_domain: str = ""  # e.g. "example.com" -> "<tenant>.example.com"
    tenant_fallback_hosts: str = "localhost,127.0.0.1,*.vercel.app"
    tenant_allowed: str = ""  # comma-separated allow-list; empty allows any
    dev_default_tenant: str = ""

    # === Alerts ===
    alert_webhook_url: str = ""

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000"

    def get_available_llm_providers(self) -> list[str]:
        """Return the LLM provider names that are configured, in priority order."""
        providers: list[str] = []
        if self.openai_api_key:
            providers.append("openai")
        if self.anthropic_api_key:
            providers.append("anthropic")
        if self.ollama_base_url:
            providers.append("ollama")
        return providers

    @staticmethod
    def split_csv(value: str) -> list[str]:
        """``"a, b,,c" -> ["a", "b", "c"]`` (lower-cased)."""
        return [item.strip().lower() for item in value.split(",") if item.strip()]
