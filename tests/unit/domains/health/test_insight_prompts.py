"""Tests for the insight prompt builders."""

from __future__ import annotations

from spitalverse.domains.health.prompts.insight_prompts import (
    build_summary_prompt,
    build_symptom_prompt,
    build_tips_prompt,
)
from spitalverse.domains.health.schemas import (
    AppointmentIn,
    LabValueIn,
    MedicationIn,
    RangeIn,
    SummaryProfile,
    SummaryRequest,
    SymptomProfile,
    SymptomRequest,
    TipsRequest,
)


def _glucose() -> LabValueIn:
    return LabValueIn(
        name="Fasting Blood Glucose", value=112, unit="mg/dL",
        normal_range=RangeIn(min=70, max=99), trend="up",
    )


class TestSummaryPrompt:
    def test_sections_with_data(self):
        request = SummaryRequest(
            profile=SummaryProfile(age=27, gender="male", blood_group="O+", allergies=["Peanuts"]),
            medications=[MedicationIn(name="Metformin", dosage="500 mg", frequency="Twice daily")],
            lab_values=[_glucose()],
            appointments=[AppointmentIn(
                doctor_name="Dr. Sarah Johnson", specialty="Endocrinologist",
                date="2025-02-15", time="10:30", notes="Bring readings",
            )],
        )
        prompt = build_summary_prompt(request)

        assert "- Age: 27 years old" in prompt
        assert "- Known Allergies: Peanuts" in prompt
        assert "- Metformin (500 mg, Twice daily)" in prompt
        assert "- Fasting Blood Glucose: 112 mg/dL (Normal: 70-99) - ↑ Elevated" in prompt
        assert (
            "- Dr. Sarah Johnson (Endocrinologist) on 2025-02-15 at 10:30 - Notes: Bring readings"
        ) in prompt

    def test_empty_sections(self):
        prompt = build_summary_prompt(SummaryRequest())
        assert "- No active medications" in prompt
        assert "- No lab values recorded" in prompt
        assert "- No upcoming appointments scheduled" in prompt
        assert "- Age:" not in prompt

    def test_camel_case_body_is_accepted(self):
        request = SummaryRequest.model_validate({
            "profile": {"bloodGroup": "A+"},
            "labValues": [{"name": "TSH", "value": 2.4, "unit": "mIU/L",
                           "normalRange": {"min": 0.4, "max": 4}, "trend": "normal"}],
        })
        prompt = build_summary_prompt(request)
        assert "- Blood Group: A+" in prompt
        assert "- TSH: 2.4 mIU/L (Normal: 0.4-4) - ✓ Normal" in prompt


class TestTipsPrompt:
    def test_only_abnormal_values_need_attention(self):
        request = TipsRequest(
            age=40,
            lab_values=[
                _glucose(),
                LabValueIn(name="TSH", value=2.4, unit="mIU/L", trend="normal"),
                LabValueIn(name="Hemoglobin", value=10, unit="g/dL", trend="down"),
            ],
        )
        prompt = build_tips_prompt(request)
        assert "Health Indicators Needing Attention:" in prompt
        assert "- Fasting Blood Glucose: 112 mg/dL (elevated)" in prompt
        assert "- Hemoglobin: 10 g/dL (low)" in prompt
        assert "TSH" not in prompt

    def test_no_medication_section_when_empty(self):
        prompt = build_tips_prompt(TipsRequest())
        assert "Current Medications:" not in prompt
        assert "Health Indicators Needing Attention:" not in prompt


class TestSymptomPrompt:
    def test_duration_defaults(self):
        prompt = build_symptom_prompt(SymptomRequest(symptoms="Headache"))
        assert "## Duration: Not specified" in prompt
        assert "## Severity: mild" in prompt
        assert "## Patient Info:" not in prompt

    def test_patient_info(self):
        request = SymptomRequest(
            symptoms="Dizziness", duration="2 days", severity="moderate",
            profile=SymptomProfile(
                age=27,
                medications=[MedicationIn(name="Amlodipine", dosage="5 mg")],
            ),
        )
        prompt = build_symptom_prompt(request)
        assert "## Duration: 2 days" in prompt
        assert "- Current Medications: Amlodipine (5 mg)" in prompt
