"""HTTP endpoints ``POST /generate-summary``, ``/health-tips``, ``/symptom-checker``.

Stateless request/response handlers: the body is validated, forwarded to
the insight gateway, and the result is returned with its ``status``. The
handlers are plain coroutines returning ``(status_code, body)`` so they
can be exercised without an HTTP stack; ``register_insight_routes`` binds
them to the server as custom routes.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastmcp import FastMCP
from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from spitalverse.domains.health.domain_logic.errors import InputValidationError
from spitalverse.domains.health.schemas import SummaryRequest, SymptomRequest, TipsRequest
from spitalverse.domains.health.services.insights import HealthInsightsService

logger = logging.getLogger(__name__)

Response = tuple[int, dict[str, Any]]


def _bad_request(message: str) -> Response:
    return 400, {"status": "error", "error": message}


async def handle_generate_summary(insights: HealthInsightsService, body: Any) -> Response:
    """``ok``/``unavailable`` answer 200; an upstream failure answers 500."""
    try:
        request = SummaryRequest.model_validate(body)
    except ValidationError as exc:
        return _bad_request(f"Invalid summary request: {exc.error_count()} error(s)")
    result = await insights.summarize(request)
    return (500 if result.status == "error" else 200), result.to_dict()


async def handle_health_tips(insights: HealthInsightsService, body: Any) -> Response:
    """Always 200 for a valid body; failures carry the fallback tips."""
    try:
        request = TipsRequest.model_validate(body)
    except ValidationError as exc:
        return _bad_request(f"Invalid tips request: {exc.error_count()} error(s)")
    result = await insights.health_tips(request)
    return 200, result.to_dict()


async def handle_symptom_checker(insights: HealthInsightsService, body: Any) -> Response:
    """Always 200 for a valid body; failures carry the fallback guidance."""
    try:
        request = SymptomRequest.model_validate(body)
        result = await insights.check_symptoms(request)
    except ValidationError as exc:
        return _bad_request(f"Invalid symptom request: {exc.error_count()} error(s)")
    except InputValidationError as exc:
        return _bad_request(str(exc))
    return 200, result.to_dict()


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def register_insight_routes(mcp: FastMCP, insights: HealthInsightsService) -> None:
    """Register the three insight endpoints as HTTP routes on the server."""

    @mcp.custom_route("/generate-summary", methods=["POST"])
    async def generate_summary(request: Request) -> JSONResponse:
        body = await _read_json(request)
        if body is None:
            status_code, payload = _bad_request("Request body must be JSON")
        else:
            status_code, payload = await handle_generate_summary(insights, body)
        return JSONResponse(payload, status_code=status_code)

    @mcp.custom_route("/health-tips", methods=["POST"])
    async def health_tips(request: Request) -> JSONResponse:
        body = await _read_json(request)
        if body is None:
            status_code, payload = _bad_request("Request body must be JSON")
        else:
            status_code, payload = await handle_health_tips(insights, body)
        return JSONResponse(payload, status_code=status_code)

    @mcp.custom_route("/symptom-checker", methods=["POST"])
    async def symptom_checker(request: Request) -> JSONResponse:
        body = await _read_json(request)
        if body is None:
            status_code, payload = _bad_request("Request body must be JSON")
        else:
            status_code, payload = await handle_symptom_checker(insights, body)
        return JSONResponse(payload, status_code=status_code)

    logger.debug("Insight routes registered")
