"""Tests for the lab catalogue and report drafting."""

from __future__ import annotations

import itertools

import pytest

from spitalverse.core.storage.models import LabValue, ReferenceRange
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
    is_submittable,
)


class TestCatalog:
    def test_find_test(self):
        test = find_test("Fasting Blood Glucose")
        assert test is not None
        assert test.unit == "mg/dL"
        assert test.normal_range == ReferenceRange(70, 99)

    def test_find_unknown(self):
        assert find_test("Unobtainium") is None

    def test_every_range_is_ordered(self):
        for category in LAB_CATEGORIES:
            for test in category.tests:
                assert test.normal_range.min <= test.normal_range.max, test.name

    def test_inverted_range_rejected(self):
        with pytest.raises(ValueError, match="min"):
            LabTest(name="Broken", unit="x", normal_range=ReferenceRange(10, 1))

    def test_search_is_case_insensitive(self):
        names = [t.name for t in search_tests("cholesterol")]
        assert names == ["Total Cholesterol", "HDL Cholesterol", "LDL Cholesterol"]

    def test_blank_search(self):
        assert search_tests("   ") == []

    def test_popular_tests_are_in_catalogue(self):
        popular = popular_tests()
        assert popular
        assert all(find_test(t.name) is t for t in popular)

    def test_suggestion_direction(self):
        low = LabValue(id="1", name="Hemoglobin", value=10, unit="g/dL",
                       normal_range=ReferenceRange(12, 17.5), trend="down", date="2024-12-15")
        assert "anemia" in suggestion_for(low)
        low.trend = "normal"
        assert suggestion_for(low) is None


class TestDrafts:
    def test_from_catalog_prefills_unit_and_range(self):
        entry = LabEntry.from_catalog("Hemoglobin", 10)
        assert entry.unit == "g/dL"
        assert entry.normal_range == ReferenceRange(12.0, 17.5)

    def test_from_catalog_unknown(self):
        with pytest.raises(LabReportValidationError, match="Unknown lab test"):
            LabEntry.from_catalog("Unobtainium")

    def test_placeholder_zero_blocks_submission(self):
        entries = [LabEntry.from_catalog("Hemoglobin", 0)]
        assert not is_submittable("Checkup", entries)
        assert "Enter a value for Hemoglobin" in draft_problems("Checkup", entries)

    def test_missing_name_and_entries(self):
        problems = draft_problems("  ", [])
        assert "Report name must not be empty" in problems
        assert "Add at least one lab value" in problems

    def test_duplicate_entry(self):
        entries = [LabEntry.from_catalog("TSH", 2), LabEntry.from_catalog("TSH", 3)]
        assert "TSH is listed more than once" in draft_problems("Thyroid", entries)

    def test_build_classifies_and_dates_values(self):
        ids = (f"id-{n}" for n in itertools.count(1))
        report = build_lab_report(
            " Annual Checkup ",
            "2024-12-15",
            [LabEntry.from_catalog("Hemoglobin", 10), LabEntry.from_catalog("Fasting Blood Glucose", 112)],
            id_factory=lambda: next(ids),
        )
        assert report.name == "Annual Checkup"
        assert [v.trend for v in report.values] == ["down", "up"]
        assert all(v.date == "2024-12-15" for v in report.values)
        assert report.id == "id-3"

    def test_build_rejects_draft(self):
        with pytest.raises(LabReportValidationError):
            build_lab_report("Checkup", "2024-12-15", [LabEntry.from_catalog("TSH")])
