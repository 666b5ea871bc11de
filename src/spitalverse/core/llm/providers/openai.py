"""OpenAI-compatible chat completions provider (OpenAI, OpenRouter)."""

from __future__ import annotations

import time

from spitalverse.core.llm.provider import ProviderResponse


class OpenAIProvider:
    """Provider using the OpenAI SDK; ``base_url`` points it at OpenRouter."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        import openai

        self.client = openai.AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or None,
            default_headers=default_headers,
        )
        self.model = model

    async def generate(
        self,
        system_message: str,
        user_message: str,
        max_tokens: int = 1500,
        temperature: float = 0.7,
        json_output: bool = False,
    ) -> ProviderResponse:
        start = time.monotonic()
        extra = {"response_format": {"type": "json_object"}} if json_output else {}
        response = await self.client.chat.completions.create(
            model=self.model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[
                {"role": "system", "content": system_message},
                {"role": "user", "content": user_message},
            ],
            **extra,
        )
        elapsed_ms = (time.monotonic() - start) * 1000

        choice = response.choices[0] if response.choices else None
        content = (choice.message.content or "") if choice else ""
        usage = response.usage
        return ProviderResponse(
            content=content,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=self.model,
            latency_ms=elapsed_ms,
        )
