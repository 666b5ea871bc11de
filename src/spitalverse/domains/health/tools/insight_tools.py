"""MCP tools for health insights: summaries, tips, symptom guidance, dashboard.

Each insight tool tries the external LLM first and resolves to the local
rule engines when it is unavailable or fails. The response says which.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from spitalverse.core.storage.store import HealthRecordStore
    from spitalverse.domains.health.services.record_insights import RecordInsightsService

from spitalverse.domains.health.domain_logic.dashboard import build_dashboard
from spitalverse.domains.health.domain_logic.errors import SymptomInputError

logger = logging.getLogger(__name__)


def register_insight_tools(
    mcp: FastMCP,
    store: HealthRecordStore,
    record_insights: RecordInsightsService,
    clock: Callable[[], datetime],
) -> None:
    """Register insight and dashboard tools on the MCP server."""

    @mcp.tool
    async def generate_health_summary(ctx: Context) -> str:
        """Generate a new health summary from the stored record and save it.

        Uses the external LLM when configured; otherwise (or on failure) the
        summary is produced locally from fixed rules.
        """
        outcome = await record_insights.generate_summary()
        logger.info("Health summary generated (source=%s, status=%s)", outcome.source, outcome.status)
        return json.dumps(outcome.to_dict())

    @mcp.tool
    async def get_latest_summary(ctx: Context) -> str:
        """Show the most recent health summary, if any."""
        latest = store.latest_summary
        if latest is None:
            return json.dumps({
                "status": "not_found",
                "message": "No health summary yet. Call generate_health_summary.",
            })
        return json.dumps({"status": "ok", "summary": latest.to_dict()})

    @mcp.tool
    async def list_health_summaries(ctx: Context, limit: int = 10) -> str:
        """List past health summaries, newest first.

        Args:
            limit: Maximum number of summaries to return.
        """
        summaries = store.health_summaries[:max(limit, 0)]
        return json.dumps({
            "status": "ok",
            "count": len(summaries),
            "summaries": [s.to_dict() for s in summaries],
        })

    @mcp.tool
    async def get_health_tips(ctx: Context) -> str:
        """Personalized daily health tips based on medications and lab trends."""
        result = await record_insights.health_tips()
        return json.dumps(result.to_dict())

    @mcp.tool
    async def check_symptoms(
        ctx: Context,
        symptoms: str,
        duration: str = "",
        severity: str = "mild",
    ) -> str:
        """Get guidance on symptoms: what to track, what to ask, what level of care.

        This is not a diagnosis.

        Args:
            symptoms: Description of the symptoms.
            duration: How long they have lasted, e.g. '3 days'.
            severity: 'mild', 'moderate' or 'severe'.
        """
        try:
            result = await record_insights.check_symptoms(symptoms, duration, severity)
        except SymptomInputError as exc:
            return json.dumps({"status": "error", "message": str(exc)})
        return json.dumps(result.to_dict())

    @mcp.tool
    async def get_dashboard(ctx: Context) -> str:
        """Overview: active medications, next appointments, abnormal lab values, latest summary."""
        view = build_dashboard(store, clock())
        return json.dumps({"status": "ok", **view.to_dict()})
