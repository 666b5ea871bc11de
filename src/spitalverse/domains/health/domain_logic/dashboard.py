"""Dashboard aggregate over the record store."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from spitalverse.core.storage.models import Appointment, HealthSummary, PatientProfile
from spitalverse.core.storage.store import HealthRecordStore
from spitalverse.domains.health.domain_logic.appointments import upcoming_appointments
from spitalverse.domains.health.domain_logic.classifier import abnormal_values, flatten_values
from spitalverse.domains.health.domain_logic.medications import active_medications
from spitalverse.domains.health.domain_logic.profile import calculate_age

DASHBOARD_APPOINTMENT_LIMIT = 3


@dataclass
class DashboardView:
    profile: PatientProfile
    age: int | None
    active_medication_count: int
    abnormal_value_count: int
    upcoming_appointments: list[Appointment] = field(default_factory=list)
    latest_summary: HealthSummary | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "profile": self.profile.to_dict(),
            "age": self.age,
            "activeMedicationCount": self.active_medication_count,
            "abnormalValueCount": self.abnormal_value_count,
            "upcomingAppointments": [a.to_dict() for a in self.upcoming_appointments],
            "latestSummary": self.latest_summary.to_dict() if self.latest_summary else None,
        }


def build_dashboard(store: HealthRecordStore, now: datetime) -> DashboardView:
    """Snapshot of the figures shown on the home screen."""
    profile = store.profile
    upcoming = upcoming_appointments(store.appointments, now)
    for appointment in upcoming:
        appointment.is_upcoming = True
    return DashboardView(
        profile=profile,
        age=calculate_age(profile.date_of_birth, now.astimezone().date()),
        active_medication_count=len(active_medications(store.medications)),
        abnormal_value_count=len(abnormal_values(flatten_values(store.lab_reports))),
        upcoming_appointments=upcoming[:DASHBOARD_APPOINTMENT_LIMIT],
        latest_summary=store.latest_summary,
    )
