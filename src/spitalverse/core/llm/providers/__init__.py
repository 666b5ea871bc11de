"""LLM provider implementations."""

from spitalverse.core.llm.providers.anthropic import AnthropicProvider
from spitalverse.core.llm.providers.mock import MockProvider
from spitalverse.core.llm.providers.openai import OpenAIProvider

__all__ = ["AnthropicProvider", "MockProvider", "OpenAIProvider"]
