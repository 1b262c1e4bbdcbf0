"""Utility modules for Atlas.

- **errors** -- Exception hierarchy rooted at AtlasError; collaborator
  failures raise their own subclass so the pipeline can pick the matching
  fallback without broad ``except Exception`` blocks.
- **logging** -- structlog setup: coloured console output in development,
  structured JSON in production.
"""

from atlas.utils.errors import (
    AlertDeliveryError,
    AtlasError,
    CandidateFetchError,
    CollaboratorError,
    ConfigurationError,
    InputValidationError,
    KnowledgeSearchError,
    LLMError,
    TenantResolutionError,
)
from atlas.utils.logging import configure_logging, get_logger

__all__ = [
    "AlertDeliveryError",
    "AtlasError",
    "CandidateFetchError",
    "CollaboratorError",
    "ConfigurationError",
    "InputValidationError",
    "KnowledgeSearchError",
    "LLMError",
    "TenantResolutionError",
    "configure_logging",
    "get_logger",
]
