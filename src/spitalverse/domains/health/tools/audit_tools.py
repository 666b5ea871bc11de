"""MCP tool for viewing the audit trail.

The audit log is PHI-free: it records which insight endpoints were called,
whether health data was sent to the external LLM, and what was deleted,
but never the data itself.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from spitalverse.core.audit.logger import AuditLogger

logger = logging.getLogger(__name__)


def register_audit_tools(
    mcp: FastMCP,
    audit_logger: AuditLogger,
) -> None:
    """Register audit trail tools on the MCP server."""

    @mcp.tool
    async def audit_summary(ctx: Context, limit: int = 20) -> str:
        """View recent LLM disclosures and deletions.

        Args:
            limit: Maximum number of recent events to show (default: 20).
        """
        events = audit_logger.get_events(limit=limit)
        display_events = [
            {
                "timestamp": event.get("timestamp"),
                "action": event.get("action"),
                "endpoint": event.get("endpoint"),
                "llm_provider": event.get("llm_provider"),
                "llm_disclosed": bool(event.get("llm_disclosed")),
                "status": event.get("status"),
                "duration_ms": event.get("duration_ms"),
            }
            for event in events
        ]
        return json.dumps({
            "status": "ok",
            "llm_disclosures": audit_logger.count_disclosures(),
            "recent_events": display_events,
            "note": (
                "This audit trail contains no health data. "
                "It tracks endpoint usage and whether data was sent to external LLMs."
            ),
        }, indent=2)
