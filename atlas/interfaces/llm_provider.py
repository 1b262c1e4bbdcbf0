"""Abstract base class for language-model providers.

The query pipeline makes exactly one model call per request, to turn an
already-ranked candidate list into a one-sentence summary.  Concrete
adapters wrap OpenAI, Anthropic or a local Ollama server; the pipeline
only ever sees this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: OpenAILLMProvider, AnthropicLLMProvider, OllamaLLMProvider
# Located in: atlas/providers/llm/
class ILLMProvider(ABC):
    """Contract for the summary model used by the Atlas query pipeline."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 200,
        json_mode: bool = False,
    ) -> str:
        """Generate a completion from the model.

        Parameters
        ----------
        system_prompt:
            The instruction message, including the JSON contract.
        user_prompt:
            The sanitised query and candidate listing.
        temperature:
            Sampling temperature (0.0 = deterministic).
        max_tokens:
            Upper bound on the number of tokens in the response.
        json_mode:
            Ask the backend to constrain output to a JSON object where it
            supports that.  Backends without such a mode ignore the flag;
            the reply is validated either way.

        Returns
        -------
        str
            The raw model text.  It is untrusted until validated.

        Raises
        ------
        atlas.utils.errors.LLMError
            If the API call fails or returns an empty response.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier such as ``"openai"`` or ``"anthropic"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured (no network call)."""

    @abstractmethod
    async def validate_credentials(self) -> bool:
        """Perform a lightweight API call to confirm the credentials work."""
