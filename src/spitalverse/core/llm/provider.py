"""LLM provider protocol — abstract interface for external LLM calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass
class ProviderResponse:
    """Response from an LLM provider."""

    content: str
    input_tokens: int
    output_tokens: int
    model: str
    latency_ms: float


@runtime_checkable
class LLMProvider(Protocol):
    """Abstract interface for external LLM calls."""

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 1500,
        temperature: float = 0.7,
        json_output: bool = False,
    ) -> ProviderResponse: ...


OPENROUTER_HEADERS = {
    "HTTP-Referer": "https://spitalverse.app",
    "X-Title": "Spitalverse Health App",
}


def create_provider(
    provider_name: str,
    api_key: str = "",
    model: str = "",
    base_url: str = "",
) -> LLMProvider:
    """Factory function to create an LLM provider by name.

    Args:
        provider_name: "openrouter", "anthropic", "openai", or "mock"
        api_key: API key for the provider.
        model: Model identifier override.
        base_url: API base URL (OpenRouter only).

    Returns:
        An LLMProvider instance.
    """
    if provider_name == "openrouter":
        from spitalverse.core.llm.providers.openai import OpenAIProvider

        return OpenAIProvider(
            api_key=api_key,
            model=model or "openai/gpt-4o-mini",
            base_url=base_url or "https://openrouter.ai/api/v1",
            default_headers=OPENROUTER_HEADERS,
        )
    elif provider_name == "openai":
        from spitalverse.core.llm.providers.openai import OpenAIProvider

        return OpenAIProvider(api_key=api_key, model=model or "gpt-4o-mini")
    elif provider_name == "anthropic":
        from spitalverse.core.llm.providers.anthropic import AnthropicProvider

        return AnthropicProvider(api_key=api_key, model=model or "claude-sonnet-4-5-20250929")
    elif provider_name == "mock":
        from spitalverse.core.llm.providers.mock import MockProvider

        return MockProvider()
    else:
        raise ValueError(f"Unknown LLM provider: {provider_name}")
