"""HTTP tests for the three insight endpoints."""

from __future__ import annotations

import json

import pytest
from starlette.testclient import TestClient

from spitalverse.core.llm.client import StructuredLLMClient
from spitalverse.core.llm.providers.mock import MockProvider
from spitalverse.core.server.app import create_app
from spitalverse.domains.health.services.insights import (
    SUMMARY_ERROR_TEXT,
    SUMMARY_UNAVAILABLE_TEXT,
)

SUMMARY_BODY = {
    "profile": {"age": 27, "gender": "male", "bloodGroup": "O+", "allergies": ["Peanuts"]},
    "medications": [{"name": "Metformin", "dosage": "500 mg", "frequency": "Twice daily"}],
    "labValues": [{
        "name": "Fasting Blood Glucose", "value": 112, "unit": "mg/dL",
        "normalRange": {"min": 70, "max": 99}, "trend": "up",
    }],
    "appointments": [],
}

TIPS_BODY = {
    "age": 27,
    "medications": [{"name": "Metformin", "dosage": "500 mg", "frequency": "Twice daily"}],
    "labValues": [],
    "hasAbnormalValues": True,
}


def _http_client(store, audit_logger, clock, provider=None) -> TestClient:
    llm_client = StructuredLLMClient(provider, provider_name="mock") if provider else None
    mcp = create_app(
        store_override=store,
        audit_logger_override=audit_logger,
        llm_client_override=llm_client,
        clock=clock,
    )
    return TestClient(mcp.http_app())


@pytest.fixture
def unavailable(store, audit_logger, clock):
    return _http_client(store, audit_logger, clock)


class TestWithoutLLM:
    def test_summary_unavailable(self, unavailable, audit_logger):
        response = unavailable.post("/generate-summary", json=SUMMARY_BODY)
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "unavailable"
        assert body["summary"] == SUMMARY_UNAVAILABLE_TEXT
        assert audit_logger.count_disclosures() == 0

    def test_tips_unavailable(self, unavailable):
        response = unavailable.post("/health-tips", json=TIPS_BODY)
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "unavailable"
        assert [t["id"] for t in body["tips"][:2]] == ["prevention-2", "medication-1"]
        assert body["focusAreas"] == ["General Wellness", "Preventive Care", "Medication Management"]

    def test_symptoms_unavailable(self, unavailable):
        response = unavailable.post(
            "/symptom-checker",
            json={"symptoms": "Headache", "duration": "2 days", "severity": "moderate"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["careLevel"] == "schedule-appointment"
        assert "for 2 days" in body["acknowledgment"]


class TestBadRequests:
    def test_non_json_body(self, unavailable):
        response = unavailable.post(
            "/generate-summary", content=b"not json", headers={"content-type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["status"] == "error"

    def test_invalid_severity(self, unavailable):
        response = unavailable.post("/symptom-checker", json={"symptoms": "x", "severity": "extreme"})
        assert response.status_code == 400

    def test_empty_symptoms(self, unavailable):
        response = unavailable.post("/symptom-checker", json={"symptoms": "   "})
        assert response.status_code == 400
        assert "Describe your symptoms" in response.json()["error"]

    def test_missing_symptoms(self, unavailable):
        response = unavailable.post("/symptom-checker", json={})
        assert response.status_code == 400


class TestWithLLM:
    def test_summary_ok(self, store, audit_logger, clock):
        reply = {"summary": "Looks fine.", "recommendations": ["Walk"], "riskLevel": "moderate"}
        provider = MockProvider(response_content=json.dumps(reply))
        http = _http_client(store, audit_logger, clock, provider)

        response = http.post("/generate-summary", json=SUMMARY_BODY)

        assert response.status_code == 200
        assert response.json() == {"status": "ok", **reply}
        assert "Fasting Blood Glucose: 112 mg/dL (Normal: 70-99) - ↑ Elevated" in (
            provider.last_user_message
        )
        assert audit_logger.count_disclosures() == 1

    def test_summary_error_is_500(self, store, audit_logger, clock):
        provider = MockProvider(error=ConnectionError("upstream down"))
        http = _http_client(store, audit_logger, clock, provider)

        response = http.post("/generate-summary", json=SUMMARY_BODY)

        assert response.status_code == 500
        body = response.json()
        assert body["status"] == "error"
        assert body["summary"] == SUMMARY_ERROR_TEXT

    def test_tips_error_still_200_with_fallback(self, store, audit_logger, clock):
        http = _http_client(store, audit_logger, clock, MockProvider(response_content="oops"))

        response = http.post("/health-tips", json=TIPS_BODY)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "error"
        assert body["dailyTip"]["title"] == "Start Your Day with Purpose"
