"""Drafting and building lab reports.

A report is assembled from draft entries, classified once, and then stored
as an immutable unit. Entries still holding the placeholder ``0`` (or no
value at all) keep the draft from being submitted.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from spitalverse.core.storage.models import LabReport, LabValue, ReferenceRange, new_id
from spitalverse.domains.health.domain_logic.classifier import classify
from spitalverse.domains.health.domain_logic.errors import LabReportValidationError
from spitalverse.domains.health.domain_logic.lab_catalog import find_test


@dataclass
class LabEntry:
    """One not-yet-saved value in a report draft."""

    name: str
    value: float | None
    unit: str
    normal_range: ReferenceRange

    @classmethod
    def from_catalog(cls, test_name: str, value: float | None = None) -> LabEntry:
        """Draft entry pre-filled with the catalogue unit and range.

        Raises:
            LabReportValidationError: If the test is not in the catalogue.
        """
        test = find_test(test_name)
        if test is None:
            raise LabReportValidationError(f"Unknown lab test: {test_name}")
        return cls(name=test.name, value=value, unit=test.unit, normal_range=test.normal_range)


def draft_problems(report_name: str, entries: Sequence[LabEntry]) -> list[str]:
    """Everything that keeps a draft from being submitted (empty = submittable)."""
    problems: list[str] = []
    if not report_name.strip():
        problems.append("Report name must not be empty")
    if not entries:
        problems.append("Add at least one lab value")

    seen: set[str] = set()
    for entry in entries:
        if entry.name in seen:
            problems.append(f"{entry.name} is listed more than once")
        seen.add(entry.name)
        if entry.value is None or entry.value == 0:
            problems.append(f"Enter a value for {entry.name}")
        if entry.normal_range.min > entry.normal_range.max:
            problems.append(f"Reference range for {entry.name} has min above max")
    return problems


def is_submittable(report_name: str, entries: Sequence[LabEntry]) -> bool:
    return not draft_problems(report_name, entries)


def build_lab_report(
    report_name: str,
    report_date: str,
    entries: Sequence[LabEntry],
    *,
    document_id: str | None = None,
    id_factory: Callable[[], str] = new_id,
) -> LabReport:
    """Turn a submittable draft into a report, classifying each value once.

    Every value is dated with the report date.

    Raises:
        LabReportValidationError: If the draft is not submittable.
    """
    problems = draft_problems(report_name, entries)
    if problems:
        raise LabReportValidationError("; ".join(problems))

    values = [
        LabValue(
            id=id_factory(),
            name=entry.name,
            value=entry.value,  # type: ignore[arg-type]
            unit=entry.unit,
            normal_range=entry.normal_range,
            trend=classify(entry.value, entry.normal_range),  # type: ignore[arg-type]
            date=report_date,
        )
        for entry in entries
    ]
    return LabReport(
        id=id_factory(),
        name=report_name.strip(),
        date=report_date,
        values=values,
        document_id=document_id,
    )
