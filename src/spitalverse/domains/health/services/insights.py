"""Insight gateway — the three LLM-backed endpoints and their fallbacks.

Every call resolves to an ``InsightResult`` carrying an explicit status:

* ``ok``: the LLM replied with a payload that validated;
* ``unavailable``: no LLM credential is configured, nothing was sent;
* ``error``: the call failed or the reply was malformed.

Tips and symptom guidance carry the local fallback payload when the
status is not ``ok``. The summary payload does not: it is a short notice
and the caller builds the full fallback from store data.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from spitalverse.core.audit.logger import AuditLogger
from spitalverse.core.llm.client import StructuredLLMClient
from spitalverse.core.llm.response import LLMResponseError
from spitalverse.domains.health.domain_logic.health_tips import generate_fallback_tips
from spitalverse.domains.health.domain_logic.symptom_triage import (
    generate_fallback_guidance,
    validate_symptom_input,
)
from spitalverse.domains.health.prompts.insight_prompts import (
    SUMMARY_INSTRUCTIONS,
    SYMPTOM_INSTRUCTIONS,
    TIPS_INSTRUCTIONS,
    build_summary_prompt,
    build_symptom_prompt,
    build_tips_prompt,
)
from spitalverse.domains.health.schemas import (
    CamelModel,
    InsightStatus,
    SummaryRequest,
    SummaryResult,
    SymptomRequest,
    SymptomResult,
    TipsRequest,
    TipsResult,
)

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)

SUMMARY_UNAVAILABLE_TEXT = (
    "AI summary is not available. Please configure your API key to enable this feature."
)
SUMMARY_ERROR_TEXT = "Unable to generate AI summary at this time. Please try again later."
SUMMARY_PLACEHOLDER_RECOMMENDATIONS = ["Continue monitoring your health metrics regularly."]


@dataclass
class InsightResult:
    status: InsightStatus
    payload: dict[str, Any]
    error_type: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, **self.payload}


def _summary_notice(text: str) -> dict[str, Any]:
    return {
        "summary": text,
        "recommendations": list(SUMMARY_PLACEHOLDER_RECOMMENDATIONS),
        "riskLevel": "low",
    }


class HealthInsightsService:
    """Stateless insight calls shared by the HTTP routes and MCP tools.

    Args:
        llm_client: Structured LLM client, or None when no credential is
            configured (every call then answers ``unavailable``).
        audit_logger: Optional audit trail; one ``llm_request`` row per call.
        provider_name: Provider label recorded in the audit trail.
    """

    def __init__(
        self,
        llm_client: StructuredLLMClient | None,
        audit_logger: AuditLogger | None = None,
        provider_name: str | None = None,
    ) -> None:
        self._llm = llm_client
        self._audit = audit_logger
        self._provider_name = provider_name or (llm_client.provider_name if llm_client else None)

    @property
    def available(self) -> bool:
        return self._llm is not None

    async def summarize(self, request: SummaryRequest) -> InsightResult:
        def fallback(status: InsightStatus) -> dict[str, Any]:
            text = SUMMARY_UNAVAILABLE_TEXT if status == "unavailable" else SUMMARY_ERROR_TEXT
            return _summary_notice(text)

        return await self._call(
            endpoint="generate-summary",
            request=request,
            instructions=SUMMARY_INSTRUCTIONS,
            user_message=build_summary_prompt(request),
            result_model=SummaryResult,
            fallback=fallback,
            temperature=0.7,
            max_tokens=1500,
        )

    async def health_tips(self, request: TipsRequest) -> InsightResult:
        def fallback(status: InsightStatus) -> dict[str, Any]:
            bundle = generate_fallback_tips(len(request.medications), request.has_abnormal_values)
            return bundle.to_dict()

        return await self._call(
            endpoint="health-tips",
            request=request,
            instructions=TIPS_INSTRUCTIONS,
            user_message=build_tips_prompt(request),
            result_model=TipsResult,
            fallback=fallback,
            temperature=0.8,
            max_tokens=1500,
        )

    async def check_symptoms(self, request: SymptomRequest) -> InsightResult:
        """Symptom guidance for a validated request.

        Raises:
            SymptomInputError: If the symptom description is empty.
        """
        validate_symptom_input(request.symptoms, request.severity)

        def fallback(status: InsightStatus) -> dict[str, Any]:
            return generate_fallback_guidance(request.duration, request.severity).to_dict()

        return await self._call(
            endpoint="symptom-checker",
            request=request,
            instructions=SYMPTOM_INSTRUCTIONS,
            user_message=build_symptom_prompt(request),
            result_model=SymptomResult,
            fallback=fallback,
            temperature=0.7,
            max_tokens=1200,
        )

    # ------------------------------------------------------------------

    async def _call(
        self,
        *,
        endpoint: str,
        request: CamelModel,
        instructions: str,
        user_message: str,
        result_model: type[_M],
        fallback: Callable[[InsightStatus], dict[str, Any]],
        temperature: float,
        max_tokens: int,
    ) -> InsightResult:
        start = time.monotonic()

        if self._llm is None:
            result = InsightResult(status="unavailable", payload=fallback("unavailable"))
            self._record(endpoint, request, result, disclosed=False, start=start)
            return result

        try:
            raw = await self._llm.complete_json(
                instructions,
                user_message,
                max_tokens=max_tokens,
                temperature=temperature,
            )
            parsed = result_model.model_validate(raw)
        except (LLMResponseError, ValidationError) as exc:
            logger.warning("Malformed LLM reply for %s: %s", endpoint, exc)
            result = InsightResult(
                status="error",
                payload=fallback("error"),
                error_type=type(exc).__name__,
            )
        except Exception as exc:
            logger.exception("LLM request for %s failed", endpoint)
            result = InsightResult(
                status="error",
                payload=fallback("error"),
                error_type=type(exc).__name__,
            )
        else:
            result = InsightResult(status="ok", payload=parsed.model_dump(by_alias=True))

        self._record(endpoint, request, result, disclosed=True, start=start)
        return result

    def _record(
        self,
        endpoint: str,
        request: CamelModel,
        result: InsightResult,
        *,
        disclosed: bool,
        start: float,
    ) -> None:
        if self._audit is None:
            return
        self._audit.log_llm_request(
            endpoint=endpoint,
            request_body=request.to_wire(),
            llm_provider=self._provider_name if disclosed else None,
            llm_disclosed=disclosed,
            duration_ms=round((time.monotonic() - start) * 1000, 1),
            status=result.status,
            error_type=result.error_type,
        )
