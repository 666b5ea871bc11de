"""Risk classification of lab values against their reference ranges."""

from __future__ import annotations

from collections.abc import Iterable

from spitalverse.core.storage.models import LabReport, LabValue, ReferenceRange

# More than this many abnormal values makes the aggregate risk "high".
HIGH_RISK_ABNORMAL_THRESHOLD = 3


def classify(value: float, normal_range: ReferenceRange) -> str:
    """Map a lab value to ``"down"``, ``"up"`` or ``"normal"``.

    Both bounds are inclusive. Ranges are expected to satisfy
    ``min <= max``; that is checked where ranges are defined, not here.
    """
    if value < normal_range.min:
        return "down"
    if value > normal_range.max:
        return "up"
    return "normal"


def flatten_values(reports: Iterable[LabReport]) -> list[LabValue]:
    """All lab values across reports, in report then entry order."""
    return [value for report in reports for value in report.values]


def abnormal_values(values: Iterable[LabValue]) -> list[LabValue]:
    return [v for v in values if v.trend != "normal"]


def partition_abnormal(values: Iterable[LabValue]) -> tuple[list[LabValue], list[LabValue]]:
    """Split values into (high, low) by their stored trend; normal ones are dropped."""
    high: list[LabValue] = []
    low: list[LabValue] = []
    for v in values:
        if v.trend == "up":
            high.append(v)
        elif v.trend == "down":
            low.append(v)
    return high, low


def risk_level_for(abnormal_count: int) -> str:
    """0 abnormal -> low, 1-3 -> moderate, more than 3 -> high."""
    if abnormal_count > HIGH_RISK_ABNORMAL_THRESHOLD:
        return "high"
    if abnormal_count > 0:
        return "moderate"
    return "low"
