"""MCP tools for exporting, importing and wiping the whole record.

The wipe implements the user's right to delete their health data. It is
gated by a typed confirmation phrase and audit-logged.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from spitalverse.core.audit.logger import AuditLogger
    from spitalverse.core.storage.store import HealthRecordStore

from spitalverse.core.storage.slots import StorageError
from spitalverse.domains.health.domain_logic.confirmation import check_wipe_confirmation
from spitalverse.domains.health.domain_logic.errors import ConfirmationError

logger = logging.getLogger(__name__)


def register_data_management_tools(
    mcp: FastMCP,
    store: HealthRecordStore,
    audit_logger: AuditLogger | None = None,
) -> None:
    """Register data management tools on the MCP server."""

    @mcp.tool
    async def export_health_data(ctx: Context) -> str:
        """Export the full record (profile and all collections) as JSON."""
        return store.export_data()

    @mcp.tool
    async def import_health_data(ctx: Context, snapshot: str) -> str:
        """Replace the whole record with a snapshot from export_health_data.

        Args:
            snapshot: The exported JSON text.
        """
        try:
            store.import_data(snapshot)
        except StorageError as exc:
            return json.dumps({"status": "error", "message": str(exc)})
        return json.dumps({
            "status": "imported",
            "medications": len(store.medications),
            "lab_reports": len(store.lab_reports),
            "appointments": len(store.appointments),
            "documents": len(store.documents),
            "health_summaries": len(store.health_summaries),
        })

    @mcp.tool
    async def clear_all_data(ctx: Context, confirmation: str = "") -> str:
        """Permanently delete ALL records and reset the profile to the default.

        This cannot be undone. Export your data first if you want a copy.

        Args:
            confirmation: Must be 'delete my data' to proceed.
        """
        try:
            check_wipe_confirmation(confirmation)
        except ConfirmationError as exc:
            return json.dumps({"status": "cancelled", "message": str(exc)})

        count = sum(
            len(collection)
            for collection in (
                store.documents,
                store.medications,
                store.lab_reports,
                store.appointments,
                store.health_summaries,
            )
        )
        store.clear_all_data()
        if audit_logger is not None:
            audit_logger.log_data_delete(endpoint="clear_all_data", entity="all", count=count)

        logger.warning("ALL health data deleted: %d records removed", count)
        return json.dumps({
            "status": "all_deleted",
            "records_deleted": count,
            "message": "All health data has been permanently deleted.",
        })
