"""Entity models for the personal health record store.

Every entity is a plain dataclass with snake_case attributes. The
persisted/exported JSON shape uses camelCase keys; ``to_dict`` and
``from_dict`` translate between the two.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Literal

Gender = Literal["male", "female", "other"]
BloodGroup = Literal["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]
MedicationStatus = Literal["active", "completed"]
Trend = Literal["up", "down", "normal"]
DocumentCategory = Literal["labs", "prescriptions", "imaging", "discharge"]
FileType = Literal["pdf", "image"]
RiskLevel = Literal["low", "moderate", "high"]

GENDERS: tuple[str, ...] = ("male", "female", "other")
BLOOD_GROUPS: tuple[str, ...] = ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-")
DOCUMENT_CATEGORIES: tuple[str, ...] = ("labs", "prescriptions", "imaging", "discharge")
RISK_LEVELS: tuple[str, ...] = ("low", "moderate", "high")


def new_id() -> str:
    """Return a fresh collision-resistant entity identifier."""
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

@dataclass
class EmergencyContact:
    name: str
    relationship: str
    phone: str
    blood_group: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "relationship": self.relationship,
            "phone": self.phone,
        }
        if self.blood_group is not None:
            data["bloodGroup"] = self.blood_group
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EmergencyContact:
        return cls(
            name=data.get("name", ""),
            relationship=data.get("relationship", ""),
            phone=data.get("phone", ""),
            blood_group=data.get("bloodGroup"),
        )


@dataclass
class PatientProfile:
    """The single patient whose record the store holds."""

    id: str
    full_name: str
    date_of_birth: str  # ISO 8601 date
    gender: str
    blood_group: str
    allergies: list[str] = field(default_factory=list)
    emergency_contact: EmergencyContact = field(
        default_factory=lambda: EmergencyContact(name="", relationship="", phone="")
    )
    photo: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "photo": self.photo,
            "fullName": self.full_name,
            "dateOfBirth": self.date_of_birth,
            "gender": self.gender,
            "bloodGroup": self.blood_group,
            "allergies": list(self.allergies),
            "emergencyContact": self.emergency_contact.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PatientProfile:
        return cls(
            id=data.get("id", ""),
            full_name=data.get("fullName", ""),
            date_of_birth=data.get("dateOfBirth", ""),
            gender=data.get("gender", ""),
            blood_group=data.get("bloodGroup", ""),
            allergies=list(data.get("allergies") or []),
            emergency_contact=EmergencyContact.from_dict(data.get("emergencyContact") or {}),
            photo=data.get("photo"),
        )


DEFAULT_PROFILE_ID = "default-profile"


def default_profile() -> PatientProfile:
    """The profile a fresh or wiped store starts with.

    A wipe resets to this profile rather than to an empty one so readers
    never see a record without a patient.
    """
    return PatientProfile(
        id=DEFAULT_PROFILE_ID,
        full_name="Jordan Avery",
        date_of_birth="1997-03-28",
        gender="male",
        blood_group="O+",
        allergies=["Penicillin", "Peanuts"],
        emergency_contact=EmergencyContact(
            name="Jane Doe",
            relationship="Spouse",
            phone="+1 (555) 123-4567",
        ),
    )


# ---------------------------------------------------------------------------
# Medications
# ---------------------------------------------------------------------------

@dataclass
class Medication:
    id: str
    name: str
    dosage: str
    frequency: str
    start_date: str
    end_date: str | None = None
    status: str = "active"
    reminder_enabled: bool = True
    notes: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "dosage": self.dosage,
            "frequency": self.frequency,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "status": self.status,
            "reminderEnabled": self.reminder_enabled,
        }
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Medication:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            dosage=data.get("dosage", ""),
            frequency=data.get("frequency", ""),
            start_date=data.get("startDate", ""),
            end_date=data.get("endDate"),
            status=data.get("status", "active"),
            reminder_enabled=bool(data.get("reminderEnabled", True)),
            notes=data.get("notes"),
        )


# ---------------------------------------------------------------------------
# Lab reports
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReferenceRange:
    """Closed interval ``[min, max]`` of normal values for one lab test."""

    min: float
    max: float

    def to_dict(self) -> dict[str, float]:
        return {"min": self.min, "max": self.max}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReferenceRange:
        return cls(min=data["min"], max=data["max"])


@dataclass
class LabValue:
    """One measured value. ``trend`` is derived when the owning report is built."""

    id: str
    name: str
    value: float
    unit: str
    normal_range: ReferenceRange
    trend: str
    date: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "value": self.value,
            "unit": self.unit,
            "normalRange": self.normal_range.to_dict(),
            "trend": self.trend,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LabValue:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            value=data.get("value", 0),
            unit=data.get("unit", ""),
            normal_range=ReferenceRange.from_dict(data.get("normalRange") or {"min": 0, "max": 0}),
            trend=data.get("trend", "normal"),
            date=data.get("date", ""),
        )


@dataclass
class LabReport:
    """A dated set of lab values, created and deleted as a unit."""

    id: str
    name: str
    date: str
    values: list[LabValue] = field(default_factory=list)
    document_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "values": [v.to_dict() for v in self.values],
        }
        if self.document_id is not None:
            data["documentId"] = self.document_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LabReport:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            date=data.get("date", ""),
            values=[LabValue.from_dict(v) for v in data.get("values") or []],
            document_id=data.get("documentId"),
        )


# ---------------------------------------------------------------------------
# Appointments
# ---------------------------------------------------------------------------

@dataclass
class Appointment:
    """A scheduled doctor visit.

    ``is_upcoming`` is a cache written alongside the record for export
    compatibility. It goes stale; use
    ``domain_logic.appointments.is_upcoming`` for anything user-facing.
    """

    id: str
    doctor_name: str
    specialty: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    location: str
    notes: str | None = None
    is_upcoming: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "doctorName": self.doctor_name,
            "specialty": self.specialty,
            "date": self.date,
            "time": self.time,
            "location": self.location,
            "isUpcoming": self.is_upcoming,
        }
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Appointment:
        return cls(
            id=data.get("id", ""),
            doctor_name=data.get("doctorName", ""),
            specialty=data.get("specialty", ""),
            date=data.get("date", ""),
            time=data.get("time", ""),
            location=data.get("location", ""),
            notes=data.get("notes"),
            is_upcoming=bool(data.get("isUpcoming", False)),
        )


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

@dataclass
class MedicalDocument:
    id: str
    name: str
    category: str
    file_type: str
    file_url: str  # base64 data URL
    upload_date: str
    file_size: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "fileType": self.file_type,
            "fileUrl": self.file_url,
            "uploadDate": self.upload_date,
            "fileSize": self.file_size,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MedicalDocument:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            category=data.get("category", "labs"),
            file_type=data.get("fileType", "pdf"),
            file_url=data.get("fileUrl", ""),
            upload_date=data.get("uploadDate", ""),
            file_size=int(data.get("fileSize", 0)),
        )


# ---------------------------------------------------------------------------
# Health summaries
# ---------------------------------------------------------------------------

@dataclass
class HealthSummary:
    """A generated narrative summary. Never mutated once stored."""

    id: str
    generated_at: str
    summary: str
    recommendations: list[str] = field(default_factory=list)
    risk_level: str = "low"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "generatedAt": self.generated_at,
            "summary": self.summary,
            "recommendations": list(self.recommendations),
            "riskLevel": self.risk_level,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HealthSummary:
        return cls(
            id=data.get("id", ""),
            generated_at=data.get("generatedAt", ""),
            summary=data.get("summary", ""),
            recommendations=list(data.get("recommendations") or []),
            risk_level=data.get("riskLevel", "low"),
        )
