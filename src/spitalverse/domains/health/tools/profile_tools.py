"""MCP tools for the patient profile."""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from spitalverse.core.storage.store import HealthRecordStore

from spitalverse.domains.health.domain_logic.errors import ProfileValidationError
from spitalverse.domains.health.domain_logic.profile import (
    calculate_age,
    validate_profile_changes,
)

logger = logging.getLogger(__name__)


def register_profile_tools(
    mcp: FastMCP,
    store: HealthRecordStore,
    clock: Callable[[], datetime],
) -> None:
    """Register profile tools on the MCP server."""

    def _profile_payload() -> dict[str, Any]:
        profile = store.profile
        return {
            **profile.to_dict(),
            "age": calculate_age(profile.date_of_birth, clock().astimezone().date()),
        }

    @mcp.tool
    async def get_profile(ctx: Context) -> str:
        """Show the patient profile, including age derived from the date of birth."""
        return json.dumps({"status": "ok", "profile": _profile_payload()})

    @mcp.tool
    async def update_profile(
        ctx: Context,
        full_name: str | None = None,
        date_of_birth: str | None = None,
        gender: str | None = None,
        blood_group: str | None = None,
        allergies: list[str] | None = None,
        emergency_contact_name: str | None = None,
        emergency_contact_relationship: str | None = None,
        emergency_contact_phone: str | None = None,
    ) -> str:
        """Update fields of the patient profile. Omitted fields are left unchanged.

        Args:
            full_name: Patient name (must not be empty).
            date_of_birth: ISO 8601 date, e.g. '1990-05-17'.
            gender: 'male', 'female' or 'other'.
            blood_group: One of A+, A-, B+, B-, AB+, AB-, O+, O-.
            allergies: Complete replacement list of known allergies.
            emergency_contact_name: Emergency contact's name.
            emergency_contact_relationship: Relationship to the patient.
            emergency_contact_phone: Emergency contact's phone number.
        """
        changes: dict[str, Any] = {
            key: value
            for key, value in (
                ("full_name", full_name),
                ("date_of_birth", date_of_birth),
                ("gender", gender),
                ("blood_group", blood_group),
                ("allergies", allergies),
            )
            if value is not None
        }
        contact_changes = {
            key: value
            for key, value in (
                ("name", emergency_contact_name),
                ("relationship", emergency_contact_relationship),
                ("phone", emergency_contact_phone),
            )
            if value is not None
        }
        if contact_changes:
            changes["emergency_contact"] = dataclasses.replace(
                store.profile.emergency_contact, **contact_changes
            )

        if not changes:
            return json.dumps({"status": "error", "message": "No profile fields provided"})
        try:
            validate_profile_changes(changes)
        except ProfileValidationError as exc:
            return json.dumps({"status": "error", "message": str(exc)})

        store.update_profile(changes)
        logger.info("Profile updated: %s", sorted(changes))
        return json.dumps({"status": "updated", "profile": _profile_payload()})
