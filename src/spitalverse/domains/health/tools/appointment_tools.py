"""MCP tools for doctor appointments.

Upcoming/past is computed from date, time and the current moment on every
read; the stored ``isUpcoming`` flag is refreshed on each write.
"""

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

from spitalverse.core.storage.models import Appointment
from spitalverse.domains.health.domain_logic.appointments import (
    appointment_datetime,
    build_appointment,
    is_upcoming,
    past_appointments,
    upcoming_appointments,
)
from spitalverse.domains.health.domain_logic.errors import AppointmentValidationError

logger = logging.getLogger(__name__)


def _with_flag(appointment: Appointment, now: datetime) -> dict[str, Any]:
    data = appointment.to_dict()
    data["isUpcoming"] = is_upcoming(appointment, now)
    return data


def _not_found(appointment_id: str) -> str:
    return json.dumps({
        "status": "not_found",
        "appointment_id": appointment_id,
        "message": "No appointment found with that ID.",
    })


def register_appointment_tools(
    mcp: FastMCP,
    store: HealthRecordStore,
    clock: Callable[[], datetime],
    audit_logger: AuditLogger | None = None,
) -> None:
    """Register appointment tools on the MCP server."""

    @mcp.tool
    async def list_appointments(ctx: Context, include_past: bool = True) -> str:
        """List upcoming appointments (soonest first) and past ones (most recent first).

        Args:
            include_past: Whether to include past appointments.
        """
        now = clock()
        appointments = store.appointments
        result: dict[str, Any] = {
            "status": "ok",
            "upcoming": [_with_flag(a, now) for a in upcoming_appointments(appointments, now)],
        }
        if include_past:
            result["past"] = [_with_flag(a, now) for a in past_appointments(appointments, now)]
        return json.dumps(result)

    @mcp.tool
    async def add_appointment(
        ctx: Context,
        doctor_name: str,
        specialty: str,
        date: str,
        time: str,
        location: str = "",
        notes: str = "",
    ) -> str:
        """Schedule a doctor appointment.

        Args:
            doctor_name: Doctor's name, e.g. 'Dr. Sarah Miller'.
            specialty: e.g. 'Endocrinologist', 'Cardiologist', 'General Physician'.
            date: ISO 8601 date (YYYY-MM-DD).
            time: 24-hour time (HH:MM).
            location: Practice or hospital.
            notes: Optional notes, e.g. what to bring.
        """
        try:
            appointment = build_appointment(
                doctor_name=doctor_name,
                specialty=specialty,
                date=date,
                time=time,
                location=location,
                notes=notes,
                now=clock(),
            )
        except AppointmentValidationError as exc:
            return json.dumps({"status": "error", "message": str(exc)})

        store.add_appointment(appointment)
        logger.info("Appointment added: %s", appointment.id)
        return json.dumps({"status": "saved", "appointment": appointment.to_dict()})

    @mcp.tool
    async def update_appointment(
        ctx: Context,
        appointment_id: str,
        doctor_name: str | None = None,
        specialty: str | None = None,
        date: str | None = None,
        time: str | None = None,
        location: str | None = None,
        notes: str | None = None,
    ) -> str:
        """Edit an appointment. Omitted fields are left unchanged.

        Args:
            appointment_id: ID of the appointment to edit.
        """
        current = store.get_appointment(appointment_id)
        if current is None:
            return _not_found(appointment_id)

        changes: dict[str, Any] = {
            key: value
            for key, value in (
                ("doctor_name", doctor_name),
                ("specialty", specialty),
                ("date", date),
                ("time", time),
                ("location", location),
                ("notes", notes),
            )
            if value is not None
        }
        updated = dataclasses.replace(current, **changes)
        if not updated.doctor_name.strip():
            return json.dumps({"status": "error", "message": "Doctor name must not be empty"})
        if appointment_datetime(updated) is None:
            return json.dumps({
                "status": "error",
                "message": f"Invalid appointment date/time: {updated.date} {updated.time}",
            })

        changes["is_upcoming"] = is_upcoming(updated, clock())
        store.update_appointment(appointment_id, changes)
        return json.dumps({
            "status": "updated",
            "appointment": store.get_appointment(appointment_id).to_dict(),  # type: ignore[union-attr]
        })

    @mcp.tool
    async def delete_appointment(ctx: Context, appointment_id: str) -> str:
        """Permanently delete an appointment.

        Args:
            appointment_id: ID of the appointment to delete.
        """
        if not store.delete_appointment(appointment_id):
            return _not_found(appointment_id)
        if audit_logger is not None:
            audit_logger.log_data_delete(
                endpoint="delete_appointment", entity="appointment", count=1
            )
        logger.info("Deleted appointment %s", appointment_id)
        return json.dumps({"status": "deleted", "appointment_id": appointment_id})
