"""YAML configuration loader with environment variable overrides.

Layers, later ones win:

  1. ``config/config.yaml``: pipeline tuning checked into the repo
  2. ``.env`` file and environment variables, via :class:`Settings`

``_deep_merge`` merges nested dicts key by key, so an override of
``{"app": {"port": 9000}}`` leaves the rest of ``app`` alone.
"""

from pathlib import Path

import yaml

from atlas.config.settings import Settings
from atlas.utils.errors import ConfigurationError

# Pipeline tuning used when config.yaml is missing or leaves a key out.
DEFAULT_ATLAS_CONFIG: dict = {
    "default_min_rating": 4.4,
    "default_max_results": 5,
    "fetch_multiplier": 2,
    "knowledge_search_limit": 30,
    "map_listing_limit": 500,
    "model": {
        "temperature": 0.2,
        "max_tokens": 200,
    },
}


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Settings to take overrides from (a fresh instance if omitted).

    Returns:
        Fully resolved configuration dictionary.

    Raises:
        ConfigurationError: If the YAML file is unreadable or not a mapping.
    """
    config: dict = {"atlas": _copy(DEFAULT_ATLAS_CONFIG)}

    config_path = Path(path)
    if config_path.exists():
        try:
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(message=f"Cannot parse {config_path}: {exc}") from exc
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(message=f"{config_path} must contain a mapping")
        _deep_merge(config, yaml_config)

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "llm": {
            "available_providers": settings.get_available_llm_providers(),
        },
        "tenant": {
            "base_domain": settings.tenant_base_domain,
            "fallback_hosts": Settings.split_csv(settings.tenant_fallback_hosts),
            "allowed": Settings.split_csv(settings.tenant_allowed),
            "dev_default": settings.dev_default_tenant,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(config, env_overrides)
    return config


def _copy(value: dict) -> dict:
    return {k: _copy(v) if isinstance(v, dict) else v for k, v in value.items()}


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
