"""Prompt templates for the three insight endpoints.

Each endpoint has a fixed instruction block (appended to the shared system
prompt) describing the JSON it must return, and a builder that lays out
the request data as Markdown-ish sections.
"""

from __future__ import annotations

from spitalverse.domains.health.schemas import (
    LabValueIn,
    SummaryRequest,
    SymptomRequest,
    TipsRequest,
)

SUMMARY_INSTRUCTIONS = """\
## Task: Personalized Health Summary

Analyze the health data (medications, lab values, upcoming appointments and \
profile) and write a detailed but concise summary that covers:
- Overall health status based on lab values
- Current medication management
- Upcoming doctor appointments and what to discuss or prepare
- Any concerning trends or values that need attention

Respond with JSON of exactly this structure:
{
    "summary": "A comprehensive 3-4 paragraph summary of the patient's health status, including medication overview, lab value analysis, and upcoming appointment reminders",
    "recommendations": ["5-7 specific, actionable recommendations covering lifestyle, medication adherence, appointment preparation, and health monitoring"],
    "riskLevel": "low|moderate|high based on the data"
}"""

TIPS_INSTRUCTIONS = """\
## Task: Daily Health Tips

Based on the patient's profile, medications and health data, generate \
relevant daily health tips. Tips must be actionable and specific, relevant \
to the profile, encouraging in tone, evidence-based when possible, and \
categorized.

Respond with JSON of exactly this structure:
{
    "dailyTip": {
        "title": "Featured tip title",
        "content": "Detailed tip content (2-3 sentences)",
        "category": "nutrition|exercise|sleep|stress|medication|prevention"
    },
    "tips": [
        {
            "id": "unique-id",
            "title": "Tip title",
            "content": "Tip content",
            "category": "nutrition|exercise|sleep|stress|medication|prevention",
            "priority": "high|medium|low"
        }
    ],
    "focusAreas": ["2-3 health areas to focus on based on the profile"]
}

Generate 5-6 diverse tips covering different categories."""

SYMPTOM_INSTRUCTIONS = """\
## Task: Symptom Guidance

You DO NOT diagnose conditions. Instead you:
1. Acknowledge the symptoms described
2. Suggest things to track or monitor
3. Provide questions to ask a doctor
4. Recommend a care level (self-care, schedule appointment, or seek immediate care)
5. Offer general wellness suggestions

Always state that this is not a medical diagnosis.

Respond with JSON of exactly this structure:
{
    "acknowledgment": "Brief acknowledgment of the symptoms described",
    "thingsToTrack": ["3-5 things to monitor or track"],
    "questionsForDoctor": ["3-5 questions to ask a doctor"],
    "careLevel": "self-care|schedule-appointment|seek-immediate-care",
    "careLevelExplanation": "Brief explanation of why this care level",
    "wellnessSuggestions": ["2-3 general wellness tips relevant to the symptoms"],
    "disclaimer": "Medical disclaimer text"
}"""

_TREND_MARKERS = {"normal": "✓ Normal", "up": "↑ Elevated", "down": "↓ Low"}


def _number(value: float) -> str:
    return f"{value:g}"


def _lab_line(lab: LabValueIn) -> str:
    line = f"- {lab.name}: {_number(lab.value)} {lab.unit}".rstrip()
    if lab.normal_range is not None:
        line += (
            f" (Normal: {_number(lab.normal_range.min)}-{_number(lab.normal_range.max)})"
        )
    return f"{line} - {_TREND_MARKERS[lab.trend]}"


def build_summary_prompt(request: SummaryRequest) -> str:
    profile = request.profile
    lines = [
        "Please analyze the following health data and provide a comprehensive, "
        "detailed health summary:",
        "",
        "## Patient Profile:",
    ]
    if profile.age:
        lines.append(f"- Age: {profile.age} years old")
    if profile.gender:
        lines.append(f"- Gender: {profile.gender}")
    if profile.blood_group:
        lines.append(f"- Blood Group: {profile.blood_group}")
    if profile.allergies:
        lines.append(f"- Known Allergies: {', '.join(profile.allergies)}")

    lines += ["", "## Current Medications:"]
    if request.medications:
        lines += [f"- {m.name} ({m.dosage}, {m.frequency})" for m in request.medications]
    else:
        lines.append("- No active medications")

    lines += ["", "## Recent Lab Values:"]
    if request.lab_values:
        lines += [_lab_line(lab) for lab in request.lab_values]
    else:
        lines.append("- No lab values recorded")

    lines += ["", "## Upcoming Doctor Appointments:"]
    if request.appointments:
        for apt in request.appointments:
            line = f"- {apt.doctor_name} ({apt.specialty}) on {apt.date} at {apt.time}"
            if apt.notes:
                line += f" - Notes: {apt.notes}"
            lines.append(line)
    else:
        lines.append("- No upcoming appointments scheduled")

    lines += [
        "",
        "Based on this data, please provide:",
        "1. A comprehensive health summary (3-4 paragraphs) covering:",
        "   - Overall health status and any concerning values",
        "   - Medication management overview",
        "   - Upcoming appointments and what to prepare/discuss with each doctor",
        "2. 5-7 specific, actionable recommendations for:",
        "   - Lifestyle improvements",
        "   - Medication adherence tips",
        "   - Questions to ask at upcoming appointments",
        "   - Health monitoring suggestions",
        "3. An overall risk assessment (low, moderate, or high)",
    ]
    return "\n".join(lines) + "\n"


def build_tips_prompt(request: TipsRequest) -> str:
    lines = ["Generate personalized health tips based on this patient profile:", ""]
    if request.age:
        lines.append(f"- Age: {request.age} years")
    if request.gender:
        lines.append(f"- Gender: {request.gender}")
    if request.blood_group:
        lines.append(f"- Blood Group: {request.blood_group}")
    if request.allergies:
        lines.append(f"- Allergies: {', '.join(request.allergies)}")

    if request.medications:
        lines += ["", "Current Medications:"]
        lines += [f"- {m.name} ({m.dosage}, {m.frequency})" for m in request.medications]

    abnormal = [v for v in request.lab_values if v.trend != "normal"]
    if abnormal:
        lines += ["", "Health Indicators Needing Attention:"]
        for v in abnormal:
            direction = "elevated" if v.trend == "up" else "low"
            lines.append(f"- {v.name}: {_number(v.value)} {v.unit} ({direction})")

    lines += [
        "",
        "Provide tips that are:",
        "1. Relevant to any medications they are taking",
        "2. Address any abnormal lab values",
        "3. Age and gender appropriate",
        "4. Consider their allergies when suggesting foods",
    ]
    return "\n".join(lines) + "\n"


def build_symptom_prompt(request: SymptomRequest) -> str:
    profile = request.profile
    lines = [
        "Please analyze the following symptoms and provide guidance:",
        "",
        "## Symptoms Described:",
        request.symptoms,
        "",
        f"## Duration: {request.duration or 'Not specified'}",
        f"## Severity: {request.severity}",
        "",
    ]
    patient: list[str] = []
    if profile.age:
        patient.append(f"- Age: {profile.age} years")
    if profile.gender:
        patient.append(f"- Gender: {profile.gender}")
    if profile.allergies:
        patient.append(f"- Known Allergies: {', '.join(profile.allergies)}")
    if profile.medications:
        meds = ", ".join(f"{m.name} ({m.dosage})" for m in profile.medications)
        patient.append(f"- Current Medications: {meds}")
    if patient:
        lines += ["## Patient Info:", *patient]

    lines += [
        "",
        "Based on these symptoms, provide:",
        "1. Things the patient should track/monitor",
        "2. Questions to ask their doctor",
        "3. Recommended care level",
        "4. General wellness suggestions",
    ]
    return "\n".join(lines) + "\n"
