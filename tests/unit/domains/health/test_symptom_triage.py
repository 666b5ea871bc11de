"""Tests for local symptom guidance."""

from __future__ import annotations

import pytest

from spitalverse.domains.health.domain_logic.errors import SymptomInputError
from spitalverse.domains.health.domain_logic.symptom_triage import (
    DISCLAIMER,
    QUESTIONS_FOR_DOCTOR,
    THINGS_TO_TRACK,
    care_level_for,
    generate_fallback_guidance,
    validate_symptom_input,
)


@pytest.mark.parametrize(
    "severity,care_level",
    [("mild", "self-care"), ("moderate", "schedule-appointment"), ("severe", "seek-immediate-care")],
)
def test_care_level_by_severity(severity, care_level):
    assert care_level_for(severity) == care_level
    assert generate_fallback_guidance("", severity).care_level == care_level


def test_acknowledgment_mentions_duration():
    guidance = generate_fallback_guidance("3 days", "mild")
    assert guidance.acknowledgment.startswith(
        "You've described symptoms that you've been experiencing for 3 days."
    )


def test_acknowledgment_without_duration():
    guidance = generate_fallback_guidance("", "mild")
    assert "experiencing." in guidance.acknowledgment


def test_guidance_lists_and_disclaimer():
    data = generate_fallback_guidance("", "moderate").to_dict()
    assert data["thingsToTrack"] == list(THINGS_TO_TRACK)
    assert data["questionsForDoctor"] == list(QUESTIONS_FOR_DOCTOR)
    assert len(data["wellnessSuggestions"]) == 3
    assert data["disclaimer"] == DISCLAIMER
    assert "within a few days" in data["careLevelExplanation"]


def test_empty_symptoms_rejected():
    with pytest.raises(SymptomInputError, match="Describe your symptoms"):
        validate_symptom_input("   ", "mild")


def test_unknown_severity_rejected():
    with pytest.raises(SymptomInputError, match="Severity must be one of"):
        validate_symptom_input("headache", "extreme")
