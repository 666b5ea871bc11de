"""Tests for the structured LLM client, reply parsing and provider factory."""

from __future__ import annotations

import asyncio
import json

import pytest

from spitalverse.core.llm.client import StructuredLLMClient
from spitalverse.core.llm.provider import LLMProvider, create_provider
from spitalverse.core.llm.providers.mock import MockProvider
from spitalverse.core.llm.response import LLMResponseError, parse_json_object, strip_code_fence
from spitalverse.core.llm.system_prompt import HEALTH_ASSISTANT_SYSTEM_PROMPT


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio required)."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


class TestParseJsonObject:
    def test_plain_object(self):
        assert parse_json_object('{"riskLevel": "low"}') == {"riskLevel": "low"}

    def test_code_fenced_object(self):
        content = '```json\n{"riskLevel": "high"}\n```'
        assert parse_json_object(content) == {"riskLevel": "high"}

    def test_strip_code_fence_leaves_plain_text(self):
        assert strip_code_fence("  {}  ") == "{}"

    def test_empty_raises(self):
        with pytest.raises(LLMResponseError, match="Empty"):
            parse_json_object("   ")

    def test_invalid_json_raises(self):
        with pytest.raises(LLMResponseError, match="not valid JSON"):
            parse_json_object("Here is your summary!")

    def test_non_object_raises(self):
        with pytest.raises(LLMResponseError, match="JSON object"):
            parse_json_object('["a", "b"]')


class TestStructuredLLMClient:
    def test_returns_parsed_object(self):
        provider = MockProvider(response_content=json.dumps({"summary": "Fine"}))
        client = StructuredLLMClient(provider, provider_name="mock")

        result = _run(client.complete_json("## Task", "Analyze this"))

        assert result == {"summary": "Fine"}
        assert provider.call_count == 1
        assert provider.last_json_output is True
        assert provider.last_user_message == "Analyze this"

    def test_system_prompt_combines_base_and_instructions(self):
        provider = MockProvider(response_content="{}")
        client = StructuredLLMClient(provider)
        _run(client.complete_json("## Task: Tips", "x"))
        assert provider.last_system_message.startswith(HEALTH_ASSISTANT_SYSTEM_PROMPT)
        assert provider.last_system_message.endswith("## Task: Tips")

    def test_provider_error_propagates(self):
        provider = MockProvider(error=ConnectionError("network down"))
        client = StructuredLLMClient(provider)
        with pytest.raises(ConnectionError):
            _run(client.complete_json("i", "u"))
        assert provider.call_count == 1  # no retry

    def test_malformed_reply_raises(self):
        client = StructuredLLMClient(MockProvider(response_content="not json"))
        with pytest.raises(LLMResponseError):
            _run(client.complete_json("i", "u"))


class TestCreateProvider:
    def test_mock(self):
        provider = create_provider("mock")
        assert isinstance(provider, MockProvider)
        assert isinstance(provider, LLMProvider)

    def test_openrouter_uses_openai_sdk_with_base_url_and_headers(self):
        from spitalverse.core.llm.providers.openai import OpenAIProvider

        provider = create_provider("openrouter", api_key="sk-or-test")
        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "openai/gpt-4o-mini"
        assert str(provider.client.base_url).startswith("https://openrouter.ai/api/v1")
        assert provider.client.default_headers["X-Title"] == "Spitalverse Health App"
        assert provider.client.default_headers["HTTP-Referer"] == "https://spitalverse.app"

    def test_openai_model_override(self):
        provider = create_provider("openai", api_key="sk-test", model="gpt-4.1-mini")
        assert provider.model == "gpt-4.1-mini"

    def test_anthropic(self):
        from spitalverse.core.llm.providers.anthropic import AnthropicProvider

        provider = create_provider("anthropic", api_key="sk-ant-test")
        assert isinstance(provider, AnthropicProvider)

    def test_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            create_provider("gemini")


class TestBuildLLMClient:
    def test_mock_provider_disables_insights(self):
        from spitalverse.core.config.settings import Settings
        from spitalverse.core.server.app import build_llm_client

        assert build_llm_client(Settings(llm_provider="mock")) is None

    def test_missing_key_disables_insights(self):
        from spitalverse.core.config.settings import Settings
        from spitalverse.core.server.app import build_llm_client

        assert build_llm_client(Settings(llm_provider="openrouter", openrouter_api_key="")) is None

    def test_configured_provider(self):
        from spitalverse.core.config.settings import Settings
        from spitalverse.core.server.app import build_llm_client

        client = build_llm_client(Settings(llm_provider="openai", openai_api_key="sk-test"))
        assert isinstance(client, StructuredLLMClient)
        assert client.provider_name == "openai"
        assert client.provider.model == "gpt-4o-mini"
