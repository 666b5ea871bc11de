"""Local health summary generator used when the external LLM is unavailable.

Pure data-in/data-out: the caller appends the result to the store. Given
the same records and the same ``now`` the output differs only in its id.

Recommendation order:

1. lab-specific advice, one entry per matching rule, in lab value order
   (or a single positive note when nothing is abnormal);
2. preparation tips for upcoming appointments, soonest first;
3. two universal wellness tips.

The list is cut to ``MAX_RECOMMENDATIONS``, so the universal tips are the
first to go.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, datetime

from spitalverse.core.storage.models import (
    Appointment,
    HealthSummary,
    LabReport,
    LabValue,
    Medication,
    PatientProfile,
    new_id,
)
from spitalverse.domains.health.domain_logic.appointments import upcoming_appointments
from spitalverse.domains.health.domain_logic.classifier import (
    abnormal_values,
    flatten_values,
    partition_abnormal,
    risk_level_for,
)
from spitalverse.domains.health.domain_logic.medications import active_medications
from spitalverse.domains.health.domain_logic.profile import calculate_age

MAX_RECOMMENDATIONS = 7


# ---------------------------------------------------------------------------
# Lab advice rules
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LabAdviceRule:
    """Advice for a lab test moving in one direction.

    Matching is on exact name (any of ``names``), or on a substring of the
    name when ``name_contains`` is set.
    """

    direction: str  # "up" | "down"
    advice: str
    names: frozenset[str] = frozenset()
    name_contains: str | None = None

    def matches(self, value: LabValue) -> bool:
        if value.trend != self.direction:
            return False
        if self.name_contains is not None:
            return self.name_contains in value.name
        return value.name in self.names


LAB_ADVICE_RULES: tuple[LabAdviceRule, ...] = (
    LabAdviceRule(
        direction="down",
        names=frozenset({"Hemoglobin"}),
        advice=(
            "Consider iron-rich foods like spinach, red meat, and legumes to help "
            "increase hemoglobin levels."
        ),
    ),
    LabAdviceRule(
        direction="up",
        name_contains="Cholesterol",
        advice=(
            "Focus on a heart-healthy diet low in saturated fats. Consider increasing "
            "fiber intake and physical activity."
        ),
    ),
    LabAdviceRule(
        direction="up",
        names=frozenset({"Fasting Blood Sugar", "Fasting Blood Glucose"}),
        advice=(
            "Monitor your carbohydrate intake and consider speaking with your doctor "
            "about blood sugar management."
        ),
    ),
    LabAdviceRule(
        direction="down",
        names=frozenset({"Vitamin D", "Vitamin D (25-OH)"}),
        advice=(
            "Consider vitamin D supplementation or increased sun exposure. "
            "Discuss with your doctor."
        ),
    ),
    LabAdviceRule(
        direction="up",
        names=frozenset({"HbA1c", "HbA1c (IFCC)"}),
        advice=(
            "Your HbA1c is above target. Ask your doctor whether a consultation with "
            "an endocrinologist about long-term blood sugar control is appropriate."
        ),
    ),
    LabAdviceRule(
        direction="up",
        names=frozenset({"LDL Cholesterol", "LDL"}),
        advice=(
            'Your LDL ("bad") cholesterol is high. Limit fried and processed foods and '
            "add soluble fiber such as oats, beans, and lentils."
        ),
    ),
)

ALL_NORMAL_RECOMMENDATION = "Continue maintaining your healthy lifestyle."


# ---------------------------------------------------------------------------
# Appointment preparation rules
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AppointmentPrepRule:
    """Preparation tip for appointments whose specialty contains a keyword."""

    keywords: tuple[str, ...]
    template: str  # formatted with doctor, specialty, date

    def matches(self, appointment: Appointment) -> bool:
        specialty = appointment.specialty.lower()
        return any(keyword in specialty for keyword in self.keywords)


APPOINTMENT_PREP_RULES: tuple[AppointmentPrepRule, ...] = (
    AppointmentPrepRule(
        keywords=("endocrin",),
        template=(
            "Before your visit with {doctor} ({specialty}) on {date}, write down your "
            "recent blood sugar readings and bring your current medication list."
        ),
    ),
    AppointmentPrepRule(
        keywords=("cardio",),
        template=(
            "Ahead of your cardiology appointment with {doctor} on {date}, track your "
            "blood pressure and heart rate for a few days and bring the readings."
        ),
    ),
    AppointmentPrepRule(
        keywords=("general", "primary"),
        template=(
            "Prepare a short list of questions and any new symptoms to discuss with "
            "{doctor} on {date}."
        ),
    ),
)

UNIVERSAL_RECOMMENDATIONS: tuple[str, ...] = (
    "Stay well hydrated by drinking 8-10 glasses of water throughout the day.",
    "Aim for 7-9 hours of quality sleep each night to support recovery and overall health.",
)

RISK_CLOSINGS: dict[str, str] = {
    "low": "No critical health risks detected based on your current data.",
    "moderate": "Some values require attention. Please consult with your healthcare provider.",
    "high": (
        "Multiple values need attention. We recommend scheduling a check-up with your doctor."
    ),
}


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def format_long_date(value: str) -> str:
    """``2024-12-15`` -> ``December 15, 2024``; unparseable input is returned as-is."""
    try:
        parsed = date.fromisoformat(value[:10])
    except ValueError:
        return value
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def _latest_report(reports: Sequence[LabReport]) -> LabReport:
    # ISO dates sort lexically; the first report wins ties.
    return max(reports, key=lambda r: r.date)


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------

def lab_recommendations(values: Sequence[LabValue]) -> list[str]:
    """Advice for abnormal values, one per matching rule, first occurrence wins."""
    advice: list[str] = []
    for value in abnormal_values(values):
        for rule in LAB_ADVICE_RULES:
            if rule.matches(value) and rule.advice not in advice:
                advice.append(rule.advice)
    return advice


def appointment_recommendations(upcoming: Sequence[Appointment]) -> list[str]:
    """One preparation tip per upcoming appointment with a recognised specialty."""
    tips: list[str] = []
    for appointment in upcoming:
        for rule in APPOINTMENT_PREP_RULES:
            if rule.matches(appointment):
                tips.append(rule.template.format(
                    doctor=appointment.doctor_name,
                    specialty=appointment.specialty,
                    date=format_long_date(appointment.date),
                ))
                break
    return tips


def build_recommendations(
    values: Sequence[LabValue],
    upcoming: Sequence[Appointment],
) -> list[str]:
    recommendations = lab_recommendations(values)
    if not abnormal_values(values):
        recommendations = [ALL_NORMAL_RECOMMENDATION]
    recommendations.extend(appointment_recommendations(upcoming))
    recommendations.extend(UNIVERSAL_RECOMMENDATIONS)
    return recommendations[:MAX_RECOMMENDATIONS]


# ---------------------------------------------------------------------------
# Narrative
# ---------------------------------------------------------------------------

def _identity_paragraph(profile: PatientProfile, age: int | None) -> str:
    parts: list[str] = []
    if profile.full_name:
        parts.append(f"Health Summary for {profile.full_name}.")

    details: list[str] = []
    if age is not None:
        details.append(f"{age} years old")
    if profile.gender:
        details.append(profile.gender)
    if details:
        sentence = f"You are {', '.join(details)}"
        if profile.blood_group:
            sentence += f", with blood type {profile.blood_group}"
        parts.append(sentence + ".")
    elif profile.blood_group:
        parts.append(f"Your blood type is {profile.blood_group}.")
    return " ".join(parts)


def _medication_paragraph(active: Sequence[Medication]) -> str:
    if not active:
        return "You have no active medications recorded."
    names = ", ".join(m.name for m in active)
    count = len(active)
    return (
        f"You are currently on {count} {_plural(count, 'medication', 'medications')}: {names}."
    )


def _lab_paragraph(reports: Sequence[LabReport], values: Sequence[LabValue]) -> str:
    if not reports:
        return (
            "No lab reports recorded yet. Consider adding your recent blood test results "
            "for personalized insights."
        )
    latest = _latest_report(reports)
    parts = [f"Your most recent lab report was on {format_long_date(latest.date)}."]

    high, low = partition_abnormal(values)
    if high:
        parts.append(f"You have elevated levels of {', '.join(v.name for v in high)}.")
    if low:
        parts.append(f"You have low levels of {', '.join(v.name for v in low)}.")
    if not high and not low:
        parts.append("All your lab values are within normal range.")
    return " ".join(parts)


def _appointment_paragraph(upcoming: Sequence[Appointment]) -> str:
    if not upcoming:
        return "You have no upcoming appointments scheduled."
    count = len(upcoming)
    listed = "; ".join(
        f"{a.doctor_name} ({a.specialty}) on {format_long_date(a.date)} at {a.time}"
        for a in upcoming
    )
    return f"You have {count} upcoming {_plural(count, 'appointment', 'appointments')}: {listed}."


def _allergy_paragraph(allergies: Sequence[str]) -> str:
    if not allergies:
        return ""
    count = len(allergies)
    return (
        f"You have {count} known {_plural(count, 'allergy', 'allergies')}: "
        f"{', '.join(allergies)}."
    )


def generate_fallback_summary(
    profile: PatientProfile,
    medications: Sequence[Medication],
    lab_reports: Sequence[LabReport],
    appointments: Sequence[Appointment],
    *,
    now: datetime,
    id_factory: Callable[[], str] = new_id,
) -> HealthSummary:
    """Build a health summary from stored records using fixed rules.

    Args:
        profile: The patient profile (age is derived from date of birth).
        medications: All medications; only active ones are considered.
        lab_reports: All lab reports; values keep their stored trend.
        appointments: All appointments; only those after ``now`` are considered.
        now: Current moment. Drives age, upcoming appointments, ``generated_at``.
        id_factory: Summary id source.
    """
    age = calculate_age(profile.date_of_birth, now.astimezone().date())
    active = active_medications(medications)
    values = flatten_values(lab_reports)
    upcoming = upcoming_appointments(appointments, now)
    risk_level = risk_level_for(len(abnormal_values(values)))

    paragraphs = [
        _identity_paragraph(profile, age),
        _medication_paragraph(active),
        _lab_paragraph(lab_reports, values),
        _appointment_paragraph(upcoming),
        _allergy_paragraph(profile.allergies),
        RISK_CLOSINGS[risk_level],
    ]

    return HealthSummary(
        id=id_factory(),
        generated_at=now.isoformat(),
        summary="\n\n".join(p for p in paragraphs if p),
        recommendations=build_recommendations(values, upcoming),
        risk_level=risk_level,
    )
