"""Custom exception hierarchy for Atlas.

All application exceptions inherit from :class:`AtlasError`, which carries
an optional ``provider_name`` so handlers can tell which collaborator
(e.g. "openai", "chromadb", "sqlite") caused the failure.

    AtlasError  (base)
    +-- InputValidationError     (bad query text / coordinates -> 400)
    +-- TenantResolutionError    (no tenant for this request -> 400/403)
    +-- CollaboratorError        (upstream data source failed)
    |   +-- KnowledgeSearchError (semantic search / embeddings)
    |   +-- CandidateFetchError  (eligibility-scoped business fetch)
    +-- LLMError                 (model call failed or returned nothing)
    +-- ConfigurationError       (startup / missing config)
    +-- AlertDeliveryError       (leak alert could not be delivered)

The query pipeline turns every one of these into a fallback response; only
the transport layer sees InputValidationError and TenantResolutionError.
"""


class AtlasError(Exception):
    """Base exception for all Atlas errors.

    ``__str__`` prefixes the provider name in brackets for log scanning,
    e.g. ``[chromadb] Query failed``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Request-boundary errors
# ---------------------------------------------------------------------------

class InputValidationError(AtlasError):
    """Raised when the inbound query is missing or malformed."""

    def __init__(
        self,
        message: str = "Query is required",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class TenantResolutionError(AtlasError):
    """Raised when no tenant can be derived for the request.

    ``status_code`` is the HTTP status the transport layer should use:
    400 when nothing identifies a tenant, 403 when the client tried to
    override the tenant on a host that does not allow it.
    """

    def __init__(
        self,
        message: str = "Tenant could not be determined",
        status_code: int = 400,
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self._status_code = status_code

    @property
    def status_code(self) -> int:
        return self._status_code


# ---------------------------------------------------------------------------
# Collaborator errors
# ---------------------------------------------------------------------------

class CollaboratorError(AtlasError):
    """Raised when an upstream data collaborator fails."""

    def __init__(
        self,
        message: str = "Upstream data source failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class KnowledgeSearchError(CollaboratorError):
    """Raised when the semantic knowledge search (or its embeddings) fails."""

    def __init__(
        self,
        message: str = "Knowledge search failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class CandidateFetchError(CollaboratorError):
    """Raised when the eligibility-scoped business fetch fails."""

    def __init__(
        self,
        message: str = "Candidate fetch failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Language model errors
# ---------------------------------------------------------------------------

class LLMError(AtlasError):
    """Raised when an LLM API call fails or returns an empty response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Operational errors
# ---------------------------------------------------------------------------

class ConfigurationError(AtlasError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class AlertDeliveryError(AtlasError):
    """Raised when a leak alert cannot be delivered to its sink."""

    def __init__(
        self,
        message: str = "Alert delivery failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
