"""Tests for the local health-tips bundle."""

from __future__ import annotations

from spitalverse.domains.health.domain_logic.health_tips import (
    BASE_TIPS,
    DAILY_TIP,
    MAX_TIPS,
    generate_fallback_tips,
)


def test_no_medications_no_abnormal_values():
    bundle = generate_fallback_tips(0, False)
    assert [t.id for t in bundle.tips] == [t.id for t in BASE_TIPS]
    assert bundle.focus_areas == ["General Wellness", "Preventive Care"]
    assert bundle.daily_tip == DAILY_TIP


def test_medication_tip_comes_first():
    bundle = generate_fallback_tips(2, False)
    assert bundle.tips[0].id == "medication-1"
    assert "You have 2 active medication(s)." in bundle.tips[0].content
    assert bundle.focus_areas == ["General Wellness", "Preventive Care", "Medication Management"]


def test_abnormal_tip_precedes_medication_tip():
    bundle = generate_fallback_tips(3, True)
    assert [t.id for t in bundle.tips[:2]] == ["prevention-2", "medication-1"]
    assert len(bundle.tips) == MAX_TIPS
    assert bundle.tips[-1].id == "stress-1"
    assert bundle.focus_areas == ["General Wellness", "Preventive Care", "Medication Management"]


def test_abnormal_only_focus_area():
    bundle = generate_fallback_tips(0, True)
    assert bundle.tips[0].id == "prevention-2"
    assert bundle.focus_areas[-1] == "Health Monitoring"


def test_wire_shape():
    data = generate_fallback_tips(1, False).to_dict()
    assert set(data) == {"dailyTip", "tips", "focusAreas"}
    assert data["dailyTip"]["title"] == "Start Your Day with Purpose"
    assert set(data["tips"][0]) == {"id", "title", "content", "category", "priority"}
