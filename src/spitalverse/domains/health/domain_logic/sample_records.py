"""Demo records for a first start with ``SEED_DEMO_DATA=true``."""

from __future__ import annotations

from spitalverse.core.storage.models import (
    Appointment,
    Medication,
    new_id,
)
from spitalverse.core.storage.store import StoreState, empty_state
from spitalverse.domains.health.domain_logic.lab_reports import LabEntry, build_lab_report


def _medications() -> list[Medication]:
    return [
        Medication(
            id=new_id(), name="Metformin", dosage="500 mg", frequency="Twice daily",
            start_date="2024-01-15", notes="Take with meals to reduce stomach upset",
        ),
        Medication(
            id=new_id(), name="Amlodipine", dosage="5 mg", frequency="Once daily",
            start_date="2024-02-01", notes="For blood pressure control",
        ),
        Medication(
            id=new_id(), name="Atorvastatin", dosage="10 mg",
            frequency="Once daily (at night)", start_date="2024-01-20",
            notes="Cholesterol management",
        ),
        Medication(
            id=new_id(), name="Vitamin D3", dosage="60,000 IU", frequency="Once weekly",
            start_date="2024-03-01", reminder_enabled=False,
            notes="Vitamin D supplementation",
        ),
    ]


def demo_state() -> StoreState:
    """Default profile plus sample medications, one lab report and two appointments."""
    state = empty_state()
    state.medications = _medications()
    state.lab_reports = [
        build_lab_report(
            "Annual Health Checkup",
            "2024-12-15",
            [
                LabEntry.from_catalog("Hemoglobin", 14.2),
                LabEntry.from_catalog("Fasting Blood Glucose", 112),
                LabEntry.from_catalog("HbA1c", 6.1),
                LabEntry.from_catalog("Total Cholesterol", 218),
                LabEntry.from_catalog("LDL Cholesterol", 142),
                LabEntry.from_catalog("HDL Cholesterol", 48),
                LabEntry.from_catalog("TSH", 2.4),
                LabEntry.from_catalog("Vitamin D (25-OH)", 24),
                LabEntry.from_catalog("Creatinine", 0.95),
            ],
        )
    ]
    state.appointments = [
        Appointment(
            id=new_id(), doctor_name="Dr. Sarah Johnson", specialty="Endocrinologist",
            date="2026-02-15", time="10:30", location="City Medical Center, Room 402",
            notes="Follow-up for diabetes management", is_upcoming=True,
        ),
        Appointment(
            id=new_id(), doctor_name="Dr. Michael Chen", specialty="Cardiologist",
            date="2026-03-01", time="14:00", location="Heart Care Clinic",
            notes="Annual heart checkup", is_upcoming=True,
        ),
    ]
    return state
