"""Tests for the store-driven insight flows."""

from __future__ import annotations

import asyncio
import json

import pytest

from spitalverse.core.llm.client import StructuredLLMClient
from spitalverse.core.llm.provider import ProviderResponse
from spitalverse.core.llm.providers.mock import MockProvider
from spitalverse.core.storage.models import Appointment, Medication
from spitalverse.domains.health.domain_logic.errors import SymptomInputError
from spitalverse.domains.health.domain_logic.fallback_summary import LAB_ADVICE_RULES
from spitalverse.domains.health.domain_logic.lab_reports import LabEntry, build_lab_report
from spitalverse.domains.health.services.insights import HealthInsightsService
from spitalverse.domains.health.services.record_insights import (
    SUMMARY_FLOW,
    RecordInsightsService,
)


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio required)."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


AI_SUMMARY = {
    "summary": "Overall you are doing well.",
    "recommendations": ["Keep walking"],
    "riskLevel": "low",
}


@pytest.fixture
def populated_store(store):
    store.add_medication(Medication(
        id="m1", name="Metformin", dosage="500 mg", frequency="Twice daily",
        start_date="2024-01-15",
    ))
    store.add_medication(Medication(
        id="m2", name="Ibuprofen", dosage="200 mg", frequency="As needed",
        start_date="2024-01-01", end_date="2024-02-01", status="completed",
    ))
    store.add_lab_report(build_lab_report(
        "Annual Checkup", "2024-12-15",
        [LabEntry.from_catalog("Hemoglobin", 10), LabEntry.from_catalog("Fasting Blood Glucose", 112)],
    ))
    store.add_appointment(Appointment(
        id="a1", doctor_name="Dr. Sarah Johnson", specialty="Endocrinologist",
        date="2025-02-15", time="10:30", location="Room 402",
    ))
    store.add_appointment(Appointment(
        id="a0", doctor_name="Dr. Old", specialty="Cardiologist",
        date="2024-05-01", time="10:30", location="Clinic",
    ))
    return store


def _service(store, clock, provider=None, audit_logger=None):
    client = StructuredLLMClient(provider, provider_name="mock") if provider else None
    insights = HealthInsightsService(client, audit_logger=audit_logger)
    return RecordInsightsService(store, insights, clock=clock)


class TestRequestBuilders:
    def test_summary_request(self, populated_store, clock):
        request = _service(populated_store, clock).summary_request()
        assert request.profile.age == 27
        assert [m.name for m in request.medications] == ["Metformin"]
        assert [(v.name, v.trend) for v in request.lab_values] == [
            ("Hemoglobin", "down"), ("Fasting Blood Glucose", "up"),
        ]
        assert [a.doctor_name for a in request.appointments] == ["Dr. Sarah Johnson"]

    def test_tips_request_flags_abnormal_values(self, populated_store, clock):
        request = _service(populated_store, clock).tips_request()
        assert request.has_abnormal_values is True
        assert request.allergies == ["Penicillin", "Peanuts"]

    def test_symptom_request_carries_active_medications(self, populated_store, clock):
        request = _service(populated_store, clock).symptom_request("Headache", "", "mild")
        assert [m.name for m in request.profile.medications] == ["Metformin"]


class TestGenerateSummary:
    def test_fallback_when_unavailable(self, populated_store, clock, fixed_now):
        outcome = _run(_service(populated_store, clock).generate_summary())

        assert outcome.status == "unavailable"
        assert outcome.source == "fallback"
        assert outcome.applied is True
        assert outcome.summary.risk_level == "moderate"
        assert LAB_ADVICE_RULES[0].advice in outcome.summary.recommendations
        assert LAB_ADVICE_RULES[2].advice in outcome.summary.recommendations
        assert outcome.summary.generated_at == fixed_now.isoformat()
        assert populated_store.latest_summary.id == outcome.summary.id

    def test_fallback_on_error(self, populated_store, clock):
        provider = MockProvider(error=TimeoutError("slow"))
        outcome = _run(_service(populated_store, clock, provider).generate_summary())
        assert outcome.status == "error"
        assert outcome.source == "fallback"
        assert "Jordan Avery" in outcome.summary.summary

    def test_ai_summary_is_stored(self, populated_store, clock):
        provider = MockProvider(response_content=json.dumps(AI_SUMMARY))
        outcome = _run(_service(populated_store, clock, provider).generate_summary())

        assert outcome.source == "ai"
        assert outcome.status == "ok"
        stored = populated_store.latest_summary
        assert stored.summary == "Overall you are doing well."
        assert stored.recommendations == ["Keep walking"]
        assert stored.risk_level == "low"

    def test_newest_summary_first(self, store, clock):
        service = _service(store, clock)
        first = _run(service.generate_summary())
        second = _run(service.generate_summary())
        assert [s.id for s in store.health_summaries] == [second.summary.id, first.summary.id]

    def test_stale_result_is_discarded(self, populated_store, clock):
        holder = {}

        class NewerRequestArrives:
            """Issues a newer summary token while the LLM call is in flight."""

            async def generate(self, system_message, user_message, max_tokens=1500,
                               temperature=0.7, json_output=False):
                holder["service"].sequencer.issue(SUMMARY_FLOW)
                return ProviderResponse(
                    content=json.dumps(AI_SUMMARY), input_tokens=0, output_tokens=0,
                    model="mock", latency_ms=0.0,
                )

        service = _service(populated_store, clock, NewerRequestArrives())
        holder["service"] = service

        outcome = _run(service.generate_summary())

        assert outcome.source == "ai"
        assert outcome.applied is False
        assert populated_store.health_summaries == []

    def test_audit_row_per_attempt(self, populated_store, clock, audit_logger):
        service = _service(populated_store, clock, audit_logger=audit_logger)
        _run(service.generate_summary())
        events = audit_logger.get_events(action="llm_request", endpoint="generate-summary")
        assert len(events) == 1
        assert events[0]["status"] == "unavailable"


class TestTipsAndSymptoms:
    def test_tips_fallback_uses_store(self, populated_store, clock):
        result = _run(_service(populated_store, clock).health_tips())
        assert result.status == "unavailable"
        assert [t["id"] for t in result.payload["tips"][:2]] == ["prevention-2", "medication-1"]
        assert "You have 1 active medication(s)." in result.payload["tips"][1]["content"]

    def test_symptoms_fallback(self, store, clock):
        result = _run(_service(store, clock).check_symptoms("Cough", "1 week", "moderate"))
        assert result.payload["careLevel"] == "schedule-appointment"
        assert "for 1 week" in result.payload["acknowledgment"]

    def test_bad_severity(self, store, clock):
        with pytest.raises(SymptomInputError):
            _run(_service(store, clock).check_symptoms("Cough", "", "unbearable"))
