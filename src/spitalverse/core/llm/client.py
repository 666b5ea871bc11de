"""Structured LLM client — sends templated prompts, returns parsed JSON."""

from __future__ import annotations

import logging
from typing import Any

from spitalverse.core.llm.provider import LLMProvider, ProviderResponse
from spitalverse.core.llm.response import parse_json_object
from spitalverse.core.llm.system_prompt import build_full_system_prompt

logger = logging.getLogger(__name__)


class StructuredLLMClient:
    """Invokes the external LLM and decodes its JSON reply.

    There is no retry: a failed call propagates to the caller, which
    degrades to the local rule engines.
    """

    def __init__(self, provider: LLMProvider, provider_name: str = "unknown") -> None:
        self.provider = provider
        self.provider_name = provider_name

    async def complete_json(
        self,
        instructions: str,
        user_message: str,
        *,
        max_tokens: int = 1500,
        temperature: float = 0.7,
    ) -> dict[str, Any]:
        """Call the provider and return the reply as a JSON object.

        Raises:
            LLMResponseError: If the reply is not a JSON object.
            Exception: Whatever the provider SDK raises on transport errors.
        """
        provider_response: ProviderResponse = await self.provider.generate(
            system_message=build_full_system_prompt(instructions),
            user_message=user_message,
            max_tokens=max_tokens,
            temperature=temperature,
            json_output=True,
        )

        logger.info(
            "LLM call: provider=%s, model=%s, tokens=%d+%d, latency=%.0fms",
            self.provider_name,
            provider_response.model,
            provider_response.input_tokens,
            provider_response.output_tokens,
            provider_response.latency_ms,
        )

        return parse_json_object(provider_response.content)
