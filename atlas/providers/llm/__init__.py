"""LLM provider adapters.

Concrete implementations of ILLMProvider (atlas/interfaces/llm_provider.py):
    - OpenAILLMProvider    -- gpt-4o-mini (also OpenAI-compatible APIs)
    - AnthropicLLMProvider -- Claude
    - OllamaLLMProvider    -- local models via an Ollama server

main.py picks the first configured one at startup.
"""

from atlas.providers.llm.anthropic_provider import AnthropicLLMProvider
from atlas.providers.llm.ollama_provider import OllamaLLMProvider
from atlas.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["OpenAILLMProvider", "AnthropicLLMProvider", "OllamaLLMProvider"]
