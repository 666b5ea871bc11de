"""Insight flows driven by the record store.

Builds endpoint requests from stored records, calls the insight gateway,
and writes summaries back to the store. The local fallback summary is
generated only after the LLM attempt has definitively answered
``unavailable`` or ``error``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from spitalverse.core.storage.models import HealthSummary, new_id
from spitalverse.core.storage.store import HealthRecordStore
from spitalverse.domains.health.domain_logic.appointments import upcoming_appointments
from spitalverse.domains.health.domain_logic.classifier import flatten_values
from spitalverse.domains.health.domain_logic.fallback_summary import generate_fallback_summary
from spitalverse.domains.health.domain_logic.medications import active_medications
from spitalverse.domains.health.domain_logic.profile import calculate_age
from spitalverse.domains.health.domain_logic.symptom_triage import validate_symptom_input
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
from spitalverse.domains.health.services.insights import HealthInsightsService, InsightResult
from spitalverse.domains.health.services.sequencing import RequestSequencer

logger = logging.getLogger(__name__)

SUMMARY_FLOW = "summary"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SummaryOutcome:
    """Result of one summary request.

    ``source`` is ``ai`` or ``fallback``; ``status`` is the gateway status
    that led to it. ``applied`` is False when a newer request was issued
    while this one was in flight, in which case the store is untouched.
    """

    summary: HealthSummary
    source: str
    status: str
    applied: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "source": self.source,
            "applied": self.applied,
            "summary": self.summary.to_dict(),
        }


class RecordInsightsService:
    def __init__(
        self,
        store: HealthRecordStore,
        insights: HealthInsightsService,
        *,
        clock: Callable[[], datetime] = _utcnow,
        sequencer: RequestSequencer | None = None,
    ) -> None:
        self._store = store
        self._insights = insights
        self._clock = clock
        self._sequencer = sequencer or RequestSequencer()

    @property
    def sequencer(self) -> RequestSequencer:
        return self._sequencer

    # ------------------------------------------------------------------
    # Request builders
    # ------------------------------------------------------------------

    def _age(self, now: datetime) -> int | None:
        return calculate_age(self._store.profile.date_of_birth, now.astimezone().date())

    def _medications_in(self) -> list[MedicationIn]:
        return [
            MedicationIn(name=m.name, dosage=m.dosage, frequency=m.frequency)
            for m in active_medications(self._store.medications)
        ]

    def _lab_values_in(self) -> list[LabValueIn]:
        return [
            LabValueIn(
                name=v.name,
                value=v.value,
                unit=v.unit,
                normal_range=RangeIn(min=v.normal_range.min, max=v.normal_range.max),
                trend=v.trend,
                date=v.date,
            )
            for v in flatten_values(self._store.lab_reports)
        ]

    def summary_request(self, now: datetime | None = None) -> SummaryRequest:
        now = now or self._clock()
        profile = self._store.profile
        return SummaryRequest(
            profile=SummaryProfile(
                age=self._age(now),
                gender=profile.gender,
                blood_group=profile.blood_group,
                allergies=list(profile.allergies),
            ),
            medications=self._medications_in(),
            lab_values=self._lab_values_in(),
            appointments=[
                AppointmentIn(
                    doctor_name=a.doctor_name,
                    specialty=a.specialty,
                    date=a.date,
                    time=a.time,
                    notes=a.notes,
                )
                for a in upcoming_appointments(self._store.appointments, now)
            ],
        )

    def tips_request(self, now: datetime | None = None) -> TipsRequest:
        now = now or self._clock()
        profile = self._store.profile
        lab_values = self._lab_values_in()
        return TipsRequest(
            age=self._age(now),
            gender=profile.gender,
            blood_group=profile.blood_group,
            allergies=list(profile.allergies),
            medications=self._medications_in(),
            lab_values=lab_values,
            has_abnormal_values=any(v.trend != "normal" for v in lab_values),
        )

    def symptom_request(self, symptoms: str, duration: str, severity: str) -> SymptomRequest:
        profile = self._store.profile
        return SymptomRequest(
            symptoms=symptoms,
            duration=duration,
            severity=severity,
            profile=SymptomProfile(
                age=self._age(self._clock()),
                gender=profile.gender,
                allergies=list(profile.allergies),
                medications=self._medications_in(),
            ),
        )

    # ------------------------------------------------------------------
    # Flows
    # ------------------------------------------------------------------

    async def generate_summary(self) -> SummaryOutcome:
        """Request a summary, falling back to the local generator, and store it."""
        token = self._sequencer.issue(SUMMARY_FLOW)
        request = self.summary_request()
        result = await self._insights.summarize(request)

        now = self._clock()
        if result.ok:
            summary = HealthSummary(
                id=new_id(),
                generated_at=now.isoformat(),
                summary=result.payload["summary"],
                recommendations=list(result.payload["recommendations"]),
                risk_level=result.payload["riskLevel"],
            )
            source = "ai"
        else:
            summary = generate_fallback_summary(
                self._store.profile,
                self._store.medications,
                self._store.lab_reports,
                self._store.appointments,
                now=now,
            )
            source = "fallback"

        applied = self._sequencer.is_current(SUMMARY_FLOW, token)
        if applied:
            self._store.add_health_summary(summary)
        else:
            logger.info("Discarding stale summary result (token %d)", token)
        return SummaryOutcome(summary=summary, source=source, status=result.status, applied=applied)

    async def health_tips(self) -> InsightResult:
        return await self._insights.health_tips(self.tips_request())

    async def check_symptoms(
        self, symptoms: str, duration: str = "", severity: str = "mild"
    ) -> InsightResult:
        """Raises SymptomInputError on an empty description or unknown severity."""
        validate_symptom_input(symptoms, severity)
        return await self._insights.check_symptoms(
            self.symptom_request(symptoms, duration, severity)
        )
