"""MCP tools for medications."""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from spitalverse.core.audit.logger import AuditLogger
    from spitalverse.core.storage.store import HealthRecordStore

from spitalverse.core.storage.models import Medication, new_id
from spitalverse.domains.health.domain_logic.errors import MedicationValidationError
from spitalverse.domains.health.domain_logic.medications import (
    completion_changes,
    validate_medication,
)

logger = logging.getLogger(__name__)


def _not_found(medication_id: str) -> str:
    return json.dumps({
        "status": "not_found",
        "medication_id": medication_id,
        "message": "No medication found with that ID.",
    })


def register_medication_tools(
    mcp: FastMCP,
    store: HealthRecordStore,
    clock: Callable[[], datetime],
    audit_logger: AuditLogger | None = None,
) -> None:
    """Register medication tools on the MCP server."""

    @mcp.tool
    async def list_medications(ctx: Context, status: str = "") -> str:
        """List medications in the order they were added.

        Args:
            status: Optional filter, 'active' or 'completed'.
        """
        medications = store.medications
        if status:
            medications = [m for m in medications if m.status == status]
        return json.dumps({
            "status": "ok",
            "count": len(medications),
            "medications": [m.to_dict() for m in medications],
        })

    @mcp.tool
    async def add_medication(
        ctx: Context,
        name: str,
        dosage: str,
        frequency: str,
        start_date: str = "",
        end_date: str = "",
        reminder_enabled: bool = True,
        notes: str = "",
    ) -> str:
        """Add a medication to the record.

        Args:
            name: Medication name, e.g. 'Metformin'.
            dosage: Dose per intake, e.g. '500 mg'.
            frequency: How often, e.g. 'Twice daily'.
            start_date: ISO 8601 date. Defaults to today.
            end_date: Optional ISO 8601 end date (not before start_date).
            reminder_enabled: Whether intake reminders are on.
            notes: Optional notes.
        """
        medication = Medication(
            id=new_id(),
            name=name.strip(),
            dosage=dosage.strip(),
            frequency=frequency.strip(),
            start_date=start_date or clock().astimezone().date().isoformat(),
            end_date=end_date or None,
            reminder_enabled=reminder_enabled,
            notes=notes or None,
        )
        try:
            validate_medication(medication)
        except MedicationValidationError as exc:
            return json.dumps({"status": "error", "message": str(exc)})

        store.add_medication(medication)
        logger.info("Medication added: %s", medication.id)
        return json.dumps({"status": "saved", "medication": medication.to_dict()})

    @mcp.tool
    async def update_medication(
        ctx: Context,
        medication_id: str,
        name: str | None = None,
        dosage: str | None = None,
        frequency: str | None = None,
        start_date: str | None = None,
        reminder_enabled: bool | None = None,
        notes: str | None = None,
    ) -> str:
        """Edit an existing medication. Omitted fields are left unchanged.

        Use complete_medication to stop a medication.

        Args:
            medication_id: ID of the medication to edit.
        """
        current = store.get_medication(medication_id)
        if current is None:
            return _not_found(medication_id)

        changes: dict[str, Any] = {
            key: value
            for key, value in (
                ("name", name),
                ("dosage", dosage),
                ("frequency", frequency),
                ("start_date", start_date),
                ("reminder_enabled", reminder_enabled),
                ("notes", notes),
            )
            if value is not None
        }
        try:
            validate_medication(dataclasses.replace(current, **changes))
        except MedicationValidationError as exc:
            return json.dumps({"status": "error", "message": str(exc)})

        store.update_medication(medication_id, changes)
        return json.dumps({
            "status": "updated",
            "medication": store.get_medication(medication_id).to_dict(),  # type: ignore[union-attr]
        })

    @mcp.tool
    async def complete_medication(ctx: Context, medication_id: str, end_date: str = "") -> str:
        """Mark an active medication as completed. This cannot be reversed.

        Args:
            medication_id: ID of the medication.
            end_date: ISO 8601 date the medication was stopped. Defaults to today.
        """
        current = store.get_medication(medication_id)
        if current is None:
            return _not_found(medication_id)
        end_date = end_date or clock().astimezone().date().isoformat()
        try:
            changes = completion_changes(current, end_date)
        except MedicationValidationError as exc:
            return json.dumps({"status": "error", "message": str(exc)})

        store.update_medication(medication_id, changes)
        logger.info("Medication completed: %s", medication_id)
        return json.dumps({
            "status": "completed",
            "medication": store.get_medication(medication_id).to_dict(),  # type: ignore[union-attr]
        })

    @mcp.tool
    async def delete_medication(ctx: Context, medication_id: str) -> str:
        """Permanently delete a medication.

        Args:
            medication_id: ID of the medication to delete.
        """
        if not store.delete_medication(medication_id):
            return _not_found(medication_id)
        if audit_logger is not None:
            audit_logger.log_data_delete(
                endpoint="delete_medication", entity="medication", count=1
            )
        logger.info("Deleted medication %s", medication_id)
        return json.dumps({"status": "deleted", "medication_id": medication_id})
