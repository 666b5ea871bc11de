"""Local symptom guidance used when the external LLM is unavailable.

The guidance never diagnoses; it only maps the reported severity to a
care level and offers generic tracking questions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from spitalverse.domains.health.domain_logic.errors import SymptomInputError

SEVERITIES: tuple[str, ...] = ("mild", "moderate", "severe")
CARE_LEVELS: tuple[str, ...] = ("self-care", "schedule-appointment", "seek-immediate-care")

_CARE_LEVEL_BY_SEVERITY = {
    "severe": "seek-immediate-care",
    "moderate": "schedule-appointment",
}

_CARE_LEVEL_EXPLANATIONS = {
    "seek-immediate-care": (
        "Severe symptoms warrant prompt medical attention. Please consult a healthcare "
        "provider soon."
    ),
    "schedule-appointment": (
        "Moderate symptoms should be evaluated by a healthcare provider within a few days."
    ),
    "self-care": (
        "Based on the mild symptoms described, self-care measures may be appropriate while "
        "monitoring for changes."
    ),
}

THINGS_TO_TRACK: tuple[str, ...] = (
    "Keep a symptom diary noting when symptoms occur and their intensity",
    "Track any activities or foods that seem to trigger or worsen symptoms",
    "Monitor your temperature if you feel feverish",
    "Note any new symptoms that develop",
    "Record how well you sleep and your energy levels",
)

QUESTIONS_FOR_DOCTOR: tuple[str, ...] = (
    "What could be causing these symptoms?",
    "Are there any tests you recommend to help identify the cause?",
    "Could any of my current medications be contributing to these symptoms?",
    "What warning signs should I watch for that would require immediate attention?",
    "Are there any lifestyle changes that might help with these symptoms?",
)

WELLNESS_SUGGESTIONS: tuple[str, ...] = (
    "Ensure you are staying well-hydrated by drinking plenty of water",
    "Get adequate rest to support your body's natural healing processes",
    "Avoid strenuous activities until symptoms improve",
)

DISCLAIMER = (
    "This information is for educational purposes only and is not a substitute for "
    "professional medical advice, diagnosis, or treatment. Always seek the advice of your "
    "physician or other qualified health provider with any questions you may have "
    "regarding a medical condition."
)


@dataclass
class SymptomGuidance:
    acknowledgment: str
    things_to_track: list[str] = field(default_factory=list)
    questions_for_doctor: list[str] = field(default_factory=list)
    care_level: str = "self-care"
    care_level_explanation: str = ""
    wellness_suggestions: list[str] = field(default_factory=list)
    disclaimer: str = DISCLAIMER

    def to_dict(self) -> dict[str, Any]:
        return {
            "acknowledgment": self.acknowledgment,
            "thingsToTrack": list(self.things_to_track),
            "questionsForDoctor": list(self.questions_for_doctor),
            "careLevel": self.care_level,
            "careLevelExplanation": self.care_level_explanation,
            "wellnessSuggestions": list(self.wellness_suggestions),
            "disclaimer": self.disclaimer,
        }


def care_level_for(severity: str) -> str:
    """severe -> seek-immediate-care, moderate -> schedule-appointment, else self-care."""
    return _CARE_LEVEL_BY_SEVERITY.get(severity, "self-care")


def validate_symptom_input(symptoms: str, severity: str) -> None:
    """Raises SymptomInputError for an empty description or unknown severity."""
    if not symptoms.strip():
        raise SymptomInputError("Describe your symptoms before submitting")
    if severity not in SEVERITIES:
        raise SymptomInputError(f"Severity must be one of: {', '.join(SEVERITIES)}")


def generate_fallback_guidance(duration: str, severity: str) -> SymptomGuidance:
    care_level = care_level_for(severity)
    since = f" for {duration}" if duration else ""
    return SymptomGuidance(
        acknowledgment=(
            f"You've described symptoms that you've been experiencing{since}. "
            "It's important to pay attention to how you're feeling."
        ),
        things_to_track=list(THINGS_TO_TRACK),
        questions_for_doctor=list(QUESTIONS_FOR_DOCTOR),
        care_level=care_level,
        care_level_explanation=_CARE_LEVEL_EXPLANATIONS[care_level],
        wellness_suggestions=list(WELLNESS_SUGGESTIONS),
    )
