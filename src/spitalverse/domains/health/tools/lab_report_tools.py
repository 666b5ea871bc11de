"""MCP tools for lab reports and the lab test catalogue.

Reports are created and deleted as a unit; there is no tool for editing a
saved report.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from spitalverse.core.audit.logger import AuditLogger
    from spitalverse.core.storage.store import HealthRecordStore

from spitalverse.core.storage.models import LabReport, ReferenceRange
from spitalverse.domains.health.domain_logic.errors import LabReportValidationError
from spitalverse.domains.health.domain_logic.lab_catalog import (
    LAB_CATEGORIES,
    LabTest,
    find_test,
    popular_tests,
    search_tests,
    suggestion_for,
)
from spitalverse.domains.health.domain_logic.lab_reports import (
    LabEntry,
    build_lab_report,
    draft_problems,
)
from spitalverse.domains.health.schemas import LabEntryInput

logger = logging.getLogger(__name__)


def _test_dict(test: LabTest) -> dict:
    return {"name": test.name, "unit": test.unit, "normalRange": test.normal_range.to_dict()}


def to_lab_entry(item: LabEntryInput) -> LabEntry:
    """Resolve a tool input into a draft entry, filling gaps from the catalogue.

    Raises:
        LabReportValidationError: For a test outside the catalogue given
            without a unit and a complete range.
    """
    test = find_test(item.name)
    if test is not None:
        unit = item.unit if item.unit is not None else test.unit
        lo = item.min if item.min is not None else test.normal_range.min
        hi = item.max if item.max is not None else test.normal_range.max
    elif item.min is None or item.max is None:
        raise LabReportValidationError(
            f"{item.name} is not in the catalogue; provide its unit, min and max"
        )
    else:
        unit, lo, hi = item.unit or "", item.min, item.max
    return LabEntry(
        name=item.name.strip(),
        value=item.value,
        unit=unit,
        normal_range=ReferenceRange(min=lo, max=hi),
    )


def _report_payload(report: LabReport) -> dict:
    data = report.to_dict()
    for value, value_data in zip(report.values, data["values"]):
        value_data["suggestion"] = suggestion_for(value)
    return data


def register_lab_report_tools(
    mcp: FastMCP,
    store: HealthRecordStore,
    clock: Callable[[], datetime],
    audit_logger: AuditLogger | None = None,
) -> None:
    """Register lab report and catalogue tools on the MCP server."""

    @mcp.tool
    async def search_lab_tests(ctx: Context, query: str = "") -> str:
        """Find lab tests in the reference catalogue.

        With an empty query, returns the popular tests and all category names.

        Args:
            query: Case-insensitive part of a test name, e.g. 'chol'.
        """
        if not query.strip():
            return json.dumps({
                "status": "ok",
                "popular": [_test_dict(t) for t in popular_tests()],
                "categories": [
                    {"key": c.key, "name": c.name, "tests": [t.name for t in c.tests]}
                    for c in LAB_CATEGORIES
                ],
            })
        matches = search_tests(query)
        return json.dumps({
            "status": "ok",
            "query": query,
            "count": len(matches),
            "tests": [_test_dict(t) for t in matches],
        })

    @mcp.tool
    async def list_lab_reports(ctx: Context) -> str:
        """List saved lab reports with their values and trends."""
        reports = store.lab_reports
        return json.dumps({
            "status": "ok",
            "count": len(reports),
            "reports": [_report_payload(r) for r in reports],
        })

    @mcp.tool
    async def add_lab_report(
        ctx: Context,
        name: str,
        entries: list[LabEntryInput],
        report_date: str = "",
        document_id: str = "",
    ) -> str:
        """Save a lab report. Each value is classified against its range once, now.

        Args:
            name: Report name, e.g. 'Annual Health Checkup'.
            entries: Values as {name, value, unit?, min?, max?}. Unit and range
                default to the catalogue entry for known tests. No value may
                be left empty or 0.
            report_date: ISO 8601 date of the report. Defaults to today.
            document_id: Optional ID of the uploaded report document.
        """
        try:
            draft = [to_lab_entry(item) for item in entries]
            report = build_lab_report(
                name,
                report_date or clock().astimezone().date().isoformat(),
                draft,
                document_id=document_id or None,
            )
        except LabReportValidationError as exc:
            return json.dumps({"status": "error", "message": str(exc)})

        store.add_lab_report(report)
        abnormal = [v.name for v in report.values if v.trend != "normal"]
        logger.info("Lab report saved: %s (%d values)", report.id, len(report.values))
        return json.dumps({
            "status": "saved",
            "report": _report_payload(report),
            "abnormal_values": abnormal,
        })

    @mcp.tool
    async def check_lab_report_draft(
        ctx: Context,
        name: str,
        entries: list[LabEntryInput],
    ) -> str:
        """Check whether a lab report could be saved, without saving it.

        Args:
            name: Report name.
            entries: Values as {name, value, unit?, min?, max?}.
        """
        try:
            draft = [to_lab_entry(item) for item in entries]
        except LabReportValidationError as exc:
            return json.dumps({"status": "ok", "submittable": False, "problems": [str(exc)]})
        problems = draft_problems(name, draft)
        return json.dumps({"status": "ok", "submittable": not problems, "problems": problems})

    @mcp.tool
    async def delete_lab_report(ctx: Context, report_id: str) -> str:
        """Permanently delete a lab report and all of its values.

        Args:
            report_id: ID of the lab report.
        """
        if not store.delete_lab_report(report_id):
            return json.dumps({
                "status": "not_found",
                "report_id": report_id,
                "message": "No lab report found with that ID.",
            })
        if audit_logger is not None:
            audit_logger.log_data_delete(
                endpoint="delete_lab_report", entity="lab_report", count=1
            )
        logger.info("Deleted lab report %s", report_id)
        return json.dumps({"status": "deleted", "report_id": report_id})
