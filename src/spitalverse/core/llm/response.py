"""Parsing of structured (JSON) LLM replies."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class LLMResponseError(Exception):
    """Raised when the provider reply is not the expected JSON object."""


def strip_code_fence(content: str) -> str:
    """Remove a surrounding Markdown code fence, if present."""
    text = content.strip()
    match = _FENCE_RE.match(text)
    return match.group(1) if match else text


def parse_json_object(content: str) -> dict[str, Any]:
    """Decode an LLM reply into a JSON object.

    Raises:
        LLMResponseError: If the reply is empty, not JSON, or not an object.
    """
    text = strip_code_fence(content)
    if not text:
        raise LLMResponseError("Empty response from LLM provider")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LLMResponseError(f"LLM response is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise LLMResponseError(
            f"LLM response must be a JSON object, got {type(payload).__name__}"
        )
    return payload
