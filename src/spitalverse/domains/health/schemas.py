"""Request and response bodies of the insight endpoints.

Field names are snake_case in Python and camelCase on the wire. LLM
replies are validated against the ``*Result`` models; a reply that does
not validate is treated like an upstream failure.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

InsightStatus = Literal["ok", "unavailable", "error"]
RiskLevel = Literal["low", "moderate", "high"]
Trend = Literal["up", "down", "normal"]
Severity = Literal["mild", "moderate", "severe"]
CareLevel = Literal["self-care", "schedule-appointment", "seek-immediate-care"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# Request pieces
# ---------------------------------------------------------------------------

class RangeIn(CamelModel):
    min: float
    max: float


class MedicationIn(CamelModel):
    name: str
    dosage: str = ""
    frequency: str = ""


class LabValueIn(CamelModel):
    name: str
    value: float
    unit: str = ""
    normal_range: RangeIn | None = None
    trend: Trend = "normal"
    date: str = ""


class AppointmentIn(CamelModel):
    doctor_name: str
    specialty: str = ""
    date: str = ""
    time: str = ""
    notes: str | None = None


class SummaryProfile(CamelModel):
    age: int | None = None
    gender: str = ""
    blood_group: str = ""
    allergies: list[str] = Field(default_factory=list)


class SymptomProfile(CamelModel):
    age: int | None = None
    gender: str = ""
    allergies: list[str] = Field(default_factory=list)
    medications: list[MedicationIn] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class SummaryRequest(CamelModel):
    profile: SummaryProfile = Field(default_factory=SummaryProfile)
    medications: list[MedicationIn] = Field(default_factory=list)
    lab_values: list[LabValueIn] = Field(default_factory=list)
    appointments: list[AppointmentIn] = Field(default_factory=list)


class TipsRequest(CamelModel):
    age: int | None = None
    gender: str = ""
    blood_group: str = ""
    allergies: list[str] = Field(default_factory=list)
    medications: list[MedicationIn] = Field(default_factory=list)
    lab_values: list[LabValueIn] = Field(default_factory=list)
    has_abnormal_values: bool = False


class SymptomRequest(CamelModel):
    symptoms: str
    duration: str = ""
    severity: Severity = "mild"
    profile: SymptomProfile = Field(default_factory=SymptomProfile)


# ---------------------------------------------------------------------------
# Results (what the LLM must return)
# ---------------------------------------------------------------------------

class SummaryResult(CamelModel):
    summary: str = Field(min_length=1)
    recommendations: list[str]
    risk_level: RiskLevel


class DailyTipOut(CamelModel):
    title: str
    content: str
    category: str


class TipOut(CamelModel):
    id: str
    title: str
    content: str
    category: str
    priority: str = "medium"


class TipsResult(CamelModel):
    daily_tip: DailyTipOut
    tips: list[TipOut]
    focus_areas: list[str]


class SymptomResult(CamelModel):
    acknowledgment: str
    things_to_track: list[str]
    questions_for_doctor: list[str]
    care_level: CareLevel
    care_level_explanation: str
    wellness_suggestions: list[str]
    disclaimer: str


# ---------------------------------------------------------------------------
# Tool inputs
# ---------------------------------------------------------------------------

class LabEntryInput(CamelModel):
    """One value of a lab report being entered.

    For catalogue tests the unit and range may be omitted and are taken
    from the catalogue.
    """

    name: str
    value: float | None = None
    unit: str | None = None
    min: float | None = None
    max: float | None = None
