"""Medication form validation and status transitions."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from spitalverse.core.storage.models import Medication
from spitalverse.domains.health.domain_logic.errors import MedicationValidationError


def active_medications(medications: Iterable[Medication]) -> list[Medication]:
    return [m for m in medications if m.status == "active"]


def _parse(value: str, label: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise MedicationValidationError(f"Invalid {label}: {value!r}") from exc


def validate_medication(medication: Medication) -> None:
    """Check a medication form before it is added or saved.

    Raises:
        MedicationValidationError: On missing name/dosage/frequency, an
            unknown status, or an end date before the start date.
    """
    for label, value in (
        ("name", medication.name),
        ("dosage", medication.dosage),
        ("frequency", medication.frequency),
    ):
        if not value.strip():
            raise MedicationValidationError(f"Medication {label} must not be empty")
    if medication.status not in ("active", "completed"):
        raise MedicationValidationError(f"Unknown medication status: {medication.status!r}")

    start = _parse(medication.start_date, "start date")
    if medication.end_date:
        end = _parse(medication.end_date, "end date")
        if end < start:
            raise MedicationValidationError("End date must not be before the start date")


def completion_changes(medication: Medication, end_date: str) -> dict[str, str]:
    """Field changes that move a medication from active to completed.

    The transition is one-way.

    Raises:
        MedicationValidationError: If the medication is already completed or
            ``end_date`` precedes its start date.
    """
    if medication.status == "completed":
        raise MedicationValidationError(f"{medication.name} is already completed")
    end = _parse(end_date, "end date")
    if end < _parse(medication.start_date, "start date"):
        raise MedicationValidationError("End date must not be before the start date")
    return {"status": "completed", "end_date": end_date}
